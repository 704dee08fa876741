from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Iterable, Iterator, Optional, Sequence

from ..core.enums import CallAction, Counter
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_score
from .model import RecentCall
from .repository import CallRepository, LockedStudent


class MySQLLockedStudent(LockedStudent):
    def __init__(self, cur, *, student_id: str, current_score: Decimal):
        self._cur = cur
        self.student_id = student_id
        self.current_score = current_score
        self._applied = False

    def read_setting(self, key: str) -> Optional[str]:
        self._cur.execute("SELECT key_value FROM settings WHERE key_name=%s", (key,))
        r = fetchone(self._cur)
        return r["key_value"] if r else None

    def apply(
        self,
        *,
        new_score: Decimal,
        counters: Iterable[Counter],
        action: CallAction,
        score_change: Decimal,
    ) -> None:
        if self._applied:
            raise RuntimeError("A locked student can only be updated once per transaction")

        # Column names come from the Counter enum, never from input.
        assignments = ["current_score=%s", "updated_at=NOW()"]
        for counter in sorted(set(counters), key=lambda c: c.value):
            assignments.append(f"{counter.value}={counter.value}+1")

        self._cur.execute(
            f"UPDATE students SET {', '.join(assignments)} WHERE student_id=%s",
            (new_score, self.student_id),
        )
        self._cur.execute(
            """
            INSERT INTO call_records(student_id, action, score_change, call_time)
            VALUES(%s,%s,%s,NOW())
            """,
            (self.student_id, action.value, score_change),
        )
        self._applied = True


class MySQLCallRepository(CallRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def lock_student(self, student_id: str) -> Iterator[Optional[LockedStudent]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT student_id, current_score FROM students WHERE student_id=%s FOR UPDATE",
                (student_id,),
            )
            r = fetchone(cur)
            if not r:
                yield None
                return
            yield MySQLLockedStudent(cur, student_id=r["student_id"], current_score=to_score(r["current_score"]))

    def recent_calls(self, limit: int) -> Sequence[RecentCall]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT r.student_id, r.action, r.score_change, r.call_time,
                       s.name, s.major, s.current_score
                FROM call_records r
                JOIN students s ON r.student_id = s.student_id
                ORDER BY r.call_time DESC, r.id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                RecentCall(
                    student_id=r["student_id"],
                    action=r["action"],
                    score_change=to_score(r["score_change"]),
                    call_time=r.get("call_time"),
                    name=r["name"],
                    major=r["major"],
                    current_score=to_score(r["current_score"]),
                )
                for r in fetchall(cur)
            ]
