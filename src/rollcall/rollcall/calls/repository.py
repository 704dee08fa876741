from __future__ import annotations

from decimal import Decimal
from typing import ContextManager, Iterable, Optional, Protocol, Sequence

from ..core.enums import CallAction, Counter
from .model import RecentCall


class LockedStudent(Protocol):
    """A student row held under an exclusive lock for one transaction."""

    student_id: str
    current_score: Decimal

    def read_setting(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def apply(
        self,
        *,
        new_score: Decimal,
        counters: Iterable[Counter],
        action: CallAction,
        score_change: Decimal,
    ) -> None:
        """Write the new score, bump counters and append the ledger row."""

        raise NotImplementedError


class CallRepository(Protocol):
    def lock_student(self, student_id: str) -> ContextManager[Optional[LockedStudent]]:
        """Open a transaction and lock the student row.

        Yields ``None`` when the student does not exist. Leaving the block
        normally commits; leaving it with an exception rolls everything back.
        """

        raise NotImplementedError

    def recent_calls(self, limit: int) -> Sequence[RecentCall]:
        raise NotImplementedError
