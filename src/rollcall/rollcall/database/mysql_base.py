from __future__ import annotations

from contextlib import contextmanager
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from ..core.constants import SCORE_QUANTUM
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Scoped transaction: commit on clean exit, roll back on any exception."""

    with conn_factory.connection() as conn:
        try:
            cur = conn.cursor(dictionary=dictionary)
            try:
                yield conn, cur
                conn.commit()
            finally:
                cur.close()
        except Exception:
            conn.rollback()
            raise


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def to_score(value: Any) -> Decimal:
    """Normalize DECIMAL(10,2) values across connector implementations.

    mysql-connector returns DECIMAL as ``decimal.Decimal`` but aggregates such
    as AVG may come back as ``Decimal`` with more places, ``float`` or ``None``.
    """

    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(SCORE_QUANTUM, rounding=ROUND_HALF_UP)


def format_score(value: Any) -> str:
    return f"{to_score(value):.2f}"
