from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_score
from .model import MajorCount, RankEntry, Totals
from .repository import StatsRepository


class MySQLStatsRepository(StatsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def totals(self) -> Totals:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS student_count,
                       AVG(current_score) AS avg_score,
                       COUNT(DISTINCT major) AS major_count
                FROM students
                """
            )
            s = fetchone(cur) or {}
            cur.execute("SELECT COUNT(*) AS call_count FROM call_records")
            c = fetchone(cur) or {}

            return Totals(
                student_count=int(s.get("student_count") or 0),
                call_count=int(c.get("call_count") or 0),
                avg_score=to_score(s.get("avg_score")),
                major_count=int(s.get("major_count") or 0),
            )

    def score_rank(self, limit: int) -> Sequence[RankEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT name, current_score FROM students ORDER BY current_score DESC, id ASC LIMIT %s",
                (int(limit),),
            )
            return [RankEntry(name=r["name"], current_score=to_score(r["current_score"])) for r in fetchall(cur)]

    def major_distribution(self) -> Sequence[MajorCount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT major, COUNT(*) AS count FROM students GROUP BY major ORDER BY major")
            return [MajorCount(major=r["major"], count=int(r["count"])) for r in fetchall(cur)]
