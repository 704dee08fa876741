from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Sequence

from ..common.logging import get_logger
from ..common.validators import require_max_length, require_non_empty
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .excel import read_import_rows, write_export
from .model import ImportReport, ImportRow, Student
from .repository import StudentRepository

log = get_logger(__name__)


@dataclass(frozen=True)
class StudentInput:
    student_id: str
    name: str
    major: str


class StudentService:
    """Use cases: manage the student registry."""

    def __init__(self, students: StudentRepository):
        self._students = students

    @staticmethod
    def _clean(student_id, name, major) -> StudentInput:
        if not student_id or not name or not major:
            raise ValidationError("Student ID, name and major are required")
        return StudentInput(
            student_id=require_max_length(require_non_empty(student_id, "Student ID"), "Student ID", 20),
            name=require_max_length(require_non_empty(name, "Name"), "Name", 50),
            major=require_max_length(require_non_empty(major, "Major"), "Major", 50),
        )

    def list_students(self, *, search: str = "", major: str = "") -> Sequence[Student]:
        return self._students.list_students(search=(search or "").strip(), major=(major or "").strip())

    def create_student(self, *, student_id, name, major) -> int:
        data = self._clean(student_id, name, major)
        if self._students.student_id_taken(data.student_id):
            raise ConflictError(f"Student ID {data.student_id} already exists")

        new_id = self._students.create_student(student_id=data.student_id, name=data.name, major=data.major)
        log.info("student created: %s", data.student_id)
        return new_id

    def update_student(self, id: int, *, student_id, name, major) -> None:
        data = self._clean(student_id, name, major)
        if not self._students.get_by_id(id):
            raise NotFoundError("Student not found")
        if self._students.student_id_taken(data.student_id, exclude_id=id):
            raise ConflictError(f"Student ID {data.student_id} already exists")

        self._students.update_profile(id, student_id=data.student_id, name=data.name, major=data.major)

    def delete_student(self, id: int) -> None:
        if not self._students.delete_with_records(id):
            raise NotFoundError("Student not found")
        log.info("student %s deleted with its call records", id)

    def import_rows(self, rows: Sequence[ImportRow]) -> ImportReport:
        valid = [r for r in rows if r.is_complete]
        if not valid:
            raise ValidationError("The workbook contains no valid student rows")

        report = self._students.import_rows(valid)
        log.info("student import finished: success=%s fail=%s", report.success, report.fail)
        return report

    def import_workbook(self, stream: BinaryIO) -> ImportReport:
        return self.import_rows(read_import_rows(stream))

    def export_workbook(self):
        students = self._students.list_for_export()
        if not students:
            raise ValidationError("There are no students to export")
        return write_export(students)
