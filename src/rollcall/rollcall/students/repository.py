from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ImportReport, ImportRow, Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Services depend on this protocol, not on a concrete database.
    """

    def list_students(self, *, search: str = "", major: str = "") -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, id: int) -> Optional[Student]:
        raise NotImplementedError

    def student_id_taken(self, student_id: str, *, exclude_id: Optional[int] = None) -> bool:
        raise NotImplementedError

    def create_student(self, *, student_id: str, name: str, major: str) -> int:
        raise NotImplementedError

    def update_profile(self, id: int, *, student_id: str, name: str, major: str) -> bool:
        raise NotImplementedError

    def delete_with_records(self, id: int) -> bool:
        """Delete a student and its ledger rows in one transaction."""

        raise NotImplementedError

    def import_rows(self, rows: Sequence[ImportRow]) -> ImportReport:
        """Insert complete rows in one transaction, collecting per-row failures."""

        raise NotImplementedError

    def list_for_export(self) -> Sequence[Student]:
        raise NotImplementedError

    def pick_random(self) -> Optional[Student]:
        raise NotImplementedError

    def pick_stalest(self) -> Optional[Student]:
        raise NotImplementedError
