from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Totals:
    student_count: int
    call_count: int
    avg_score: Decimal
    major_count: int


@dataclass(frozen=True)
class RankEntry:
    name: str
    current_score: Decimal


@dataclass(frozen=True)
class MajorCount:
    major: str
    count: int
