from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_score
from .model import ImportReport, ImportRow, Student
from .repository import StudentRepository

_COLUMNS = """
    id, student_id, name, major, current_score,
    total_calls, arrived_calls, correct_answers, transfer_rights, updated_at
"""


def _to_student(r: dict) -> Student:
    return Student(
        id=int(r["id"]),
        student_id=r["student_id"],
        name=r["name"],
        major=r["major"],
        current_score=to_score(r.get("current_score")),
        total_calls=int(r.get("total_calls") or 0),
        arrived_calls=int(r.get("arrived_calls") or 0),
        correct_answers=int(r.get("correct_answers") or 0),
        transfer_rights=int(r.get("transfer_rights") or 0),
        updated_at=r.get("updated_at"),
    )


def _is_duplicate(exc: mysql.connector.Error) -> bool:
    return getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_students(self, *, search: str = "", major: str = "") -> Sequence[Student]:
        clauses = ["1=1"]
        params: list[object] = []

        if search:
            like = f"%{search}%"
            clauses.append("(student_id LIKE %s OR name LIKE %s OR major LIKE %s)")
            params.extend([like, like, like])
        if major:
            clauses.append("major=%s")
            params.append(major)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE {where} ORDER BY updated_at DESC, id DESC",
                tuple(params),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (int(id),))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def student_id_taken(self, student_id: str, *, exclude_id: Optional[int] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if exclude_id is None:
                cur.execute("SELECT id FROM students WHERE student_id=%s", (student_id,))
            else:
                cur.execute(
                    "SELECT id FROM students WHERE student_id=%s AND id<>%s",
                    (student_id, int(exclude_id)),
                )
            return fetchone(cur) is not None

    def create_student(self, *, student_id: str, name: str, major: str) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO students(student_id, name, major, current_score)
                    VALUES(%s,%s,%s,0.00)
                    """,
                    (student_id, name, major),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if _is_duplicate(exc):
                raise ConflictError(f"Student ID {student_id} already exists") from exc
            raise

    def update_profile(self, id: int, *, student_id: str, name: str, major: str) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE students
                    SET student_id=%s, name=%s, major=%s, updated_at=NOW()
                    WHERE id=%s
                    """,
                    (student_id, name, major, int(id)),
                )
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as exc:
            if _is_duplicate(exc):
                raise ConflictError(f"Student ID {student_id} already exists") from exc
            raise

    def delete_with_records(self, id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id FROM students WHERE id=%s FOR UPDATE", (int(id),))
            r = fetchone(cur)
            if not r:
                return False
            cur.execute("DELETE FROM call_records WHERE student_id=%s", (r["student_id"],))
            cur.execute("DELETE FROM students WHERE id=%s", (int(id),))
            return cur.rowcount > 0

    def import_rows(self, rows: Sequence[ImportRow]) -> ImportReport:
        report = ImportReport()

        with db_cursor(self._conn_factory) as (_, cur):
            for row in rows:
                cur.execute("SELECT id FROM students WHERE student_id=%s", (row.student_id,))
                if fetchone(cur) is not None:
                    report.record_failure(row.row_number, f"student ID {row.student_id} already exists")
                    continue
                try:
                    cur.execute(
                        """
                        INSERT INTO students(student_id, name, major, current_score)
                        VALUES(%s,%s,%s,0.00)
                        """,
                        (row.student_id, row.name, row.major),
                    )
                except (mysql.connector.IntegrityError, mysql.connector.DataError) as exc:
                    # InnoDB rolls back only the failed statement; the batch goes on.
                    report.record_failure(row.row_number, exc.msg)
                    continue
                report.success += 1

        return report

    def list_for_export(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY major ASC, name ASC")
            return [_to_student(r) for r in fetchall(cur)]

    def pick_random(self) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY RAND() LIMIT 1")
            r = fetchone(cur)
            return _to_student(r) if r else None

    def pick_stalest(self) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY updated_at ASC, id ASC LIMIT 1")
            r = fetchone(cur)
            return _to_student(r) if r else None
