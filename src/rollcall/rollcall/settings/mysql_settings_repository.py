from __future__ import annotations

from typing import Mapping, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_all(self) -> dict[str, Optional[str]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT key_name, key_value FROM settings ORDER BY key_name")
            return {r["key_name"]: r.get("key_value") for r in fetchall(cur)}

    def save(self, values: Mapping[str, str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for key, value in values.items():
                cur.execute(
                    """
                    INSERT INTO settings(key_name, key_value)
                    VALUES(%s,%s)
                    ON DUPLICATE KEY UPDATE key_value=VALUES(key_value), updated_at=NOW()
                    """,
                    (key, value),
                )
