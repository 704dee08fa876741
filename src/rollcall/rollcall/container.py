from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from .calls.mysql_call_repository import MySQLCallRepository
from .calls.service import CallService
from .core.constants import DEFAULT_POOL_SIZE
from .database.connection import DBConfig, DatabaseConnection
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService
from .stats.mysql_stats_repository import MySQLStatsRepository
from .stats.service import StatsService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    student_service: StudentService
    call_service: CallService
    settings_service: SettingsService
    stats_service: StatsService

    conn: Optional[DatabaseConnection] = None

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()


def build_container(
    *,
    db_config: dict,
    pool_size: int = DEFAULT_POOL_SIZE,
    rng: Optional[random.Random] = None,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config), pool_size=pool_size)

    students_repo = MySQLStudentRepository(conn)
    calls_repo = MySQLCallRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)
    stats_repo = MySQLStatsRepository(conn)

    return Container(
        student_service=StudentService(students_repo),
        call_service=CallService(calls_repo, students_repo, rng=rng),
        settings_service=SettingsService(settings_repo),
        stats_service=StatsService(stats_repo),
        conn=conn,
    )
