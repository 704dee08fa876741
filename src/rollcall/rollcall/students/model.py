from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on the roll."""

    id: int
    student_id: str
    name: str
    major: str
    current_score: Decimal = Decimal("0.00")
    total_calls: int = 0
    arrived_calls: int = 0
    correct_answers: int = 0
    transfer_rights: int = 0
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ImportRow:
    """One data row of an import workbook, with its row number in the file."""

    row_number: int
    student_id: Optional[str]
    name: Optional[str]
    major: Optional[str]

    @property
    def is_complete(self) -> bool:
        return bool(self.student_id and self.name and self.major)


@dataclass
class ImportReport:
    success: int = 0
    fail: int = 0
    fail_reasons: list[str] = field(default_factory=list)

    def record_failure(self, row_number: int, reason: str) -> None:
        self.fail += 1
        self.fail_reasons.append(f"Row {row_number}: {reason}")

    def to_dict(self) -> dict:
        return {"success": self.success, "fail": self.fail, "failReasons": list(self.fail_reasons)}


def student_to_dict(s: Student) -> dict:
    return {
        "id": s.id,
        "student_id": s.student_id,
        "name": s.name,
        "major": s.major,
        "current_score": f"{s.current_score:.2f}",
        "total_calls": s.total_calls,
        "arrived_calls": s.arrived_calls,
        "correct_answers": s.correct_answers,
        "transfer_rights": s.transfer_rights,
        "updated_at": s.updated_at.strftime("%Y-%m-%d %H:%M:%S") if s.updated_at else None,
    }
