from __future__ import annotations

from typing import Sequence

from ..core.constants import SCORE_RANK_LIMIT
from .model import MajorCount, RankEntry, Totals
from .repository import StatsRepository


class StatsService:
    def __init__(self, stats: StatsRepository):
        self._stats = stats

    def totals(self) -> Totals:
        return self._stats.totals()

    def score_rank(self, limit: int = SCORE_RANK_LIMIT) -> Sequence[RankEntry]:
        return self._stats.score_rank(limit)

    def major_distribution(self) -> Sequence[MajorCount]:
        return self._stats.major_distribution()
