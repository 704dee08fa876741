from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import mysql.connector
from mysql.connector import pooling

from ..common.logging import get_logger
from ..core.constants import DEFAULT_POOL_SIZE, MAX_POOL_SIZE
from ..core.exceptions import UnavailableError

log = get_logger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_mapping(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "rollcall_db")),
        )


class DatabaseConnection:
    """Connection pool handle with an explicit lifecycle.

    Built by the container, opened once at startup and closed at shutdown.
    mysql-connector's pool fails immediately when exhausted, so checkouts are
    gated by a semaphore and excess callers wait for a free connection.
    """

    def __init__(self, config: DBConfig, *, pool_size: int = DEFAULT_POOL_SIZE, pool_name: str = "rollcall"):
        self._config = config
        self._pool_size = max(1, min(int(pool_size), MAX_POOL_SIZE))
        self._pool_name = pool_name
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._slots = threading.BoundedSemaphore(self._pool_size)
        self._lock = threading.Lock()

    @property
    def config(self) -> DBConfig:
        return self._config

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self) -> None:
        with self._lock:
            if self._pool is not None:
                return
            try:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name=self._pool_name,
                    pool_size=self._pool_size,
                    pool_reset_session=True,
                    host=self._config.host,
                    port=int(self._config.port),
                    user=self._config.user,
                    password=self._config.password,
                    database=self._config.database,
                    autocommit=False,
                )
            except mysql.connector.Error as exc:
                raise UnavailableError(f"Cannot reach database: {exc}") from exc
        log.info(
            "database pool opened: %s@%s:%s/%s (size=%s)",
            self._config.user,
            self._config.host,
            self._config.port,
            self._config.database,
            self._pool_size,
        )

    def close(self) -> None:
        with self._lock:
            pool, self._pool = self._pool, None
            if pool is None:
                return
            # Only idle connections are closed here; checked-out ones are
            # returned to the discarded pool by their holders.
            closed = pool._remove_connections()
        log.info("database pool closed (%s idle connections)", closed)

    @contextmanager
    def connection(self) -> Iterator[object]:
        """Borrow a pooled connection; it is returned to the pool on exit."""

        pool = self._pool
        if pool is None:
            raise UnavailableError("Database pool is not open")

        self._slots.acquire()
        try:
            try:
                conn = pool.get_connection()
            except mysql.connector.Error as exc:
                raise UnavailableError(f"Cannot reach database: {exc}") from exc
            try:
                yield conn
            finally:
                conn.close()
        finally:
            self._slots.release()
