from __future__ import annotations

from typing import Protocol, Sequence

from .model import MajorCount, RankEntry, Totals


class StatsRepository(Protocol):
    def totals(self) -> Totals:
        raise NotImplementedError

    def score_rank(self, limit: int) -> Sequence[RankEntry]:
        raise NotImplementedError

    def major_distribution(self) -> Sequence[MajorCount]:
        raise NotImplementedError
