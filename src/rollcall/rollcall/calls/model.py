from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class RecentCall:
    """Read-model for the recent calls feed (ledger row joined with its student)."""

    student_id: str
    action: str
    score_change: Decimal
    call_time: Optional[datetime]
    name: str
    major: str
    current_score: Decimal


@dataclass(frozen=True)
class SubmissionResult:
    applied_delta: Decimal
    new_score: Decimal
    bonus_triggered: bool

    @property
    def display_score(self) -> str:
        return f"{self.new_score:.2f}"


def recent_call_to_dict(r: RecentCall) -> dict:
    return {
        "student_id": r.student_id,
        "action": r.action,
        "score_change": f"{r.score_change:.2f}",
        "call_time": r.call_time.strftime("%Y-%m-%d %H:%M:%S") if r.call_time else "",
        "name": r.name,
        "major": r.major,
        "current_score": f"{r.current_score:.2f}",
    }
