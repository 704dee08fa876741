from __future__ import annotations

import random
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Sequence

from ..common.logging import get_logger
from ..common.validators import parse_decimal, require_non_empty, require_within
from ..core.constants import BONUS_MULTIPLIER, MAX_SCORE, RECENT_CALLS_LIMIT, SCORE_QUANTUM
from ..core.enums import CallAction, CallMode, SettingKey
from ..core.exceptions import NoStudentsError, NotFoundError, ValidationError
from ..settings.service import read_probability
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import RecentCall, SubmissionResult
from .repository import CallRepository
from .rules import counters_for

log = get_logger(__name__)


class CallService:
    """Use cases: pick a student for a roll-call and record its outcome.

    ``score_change`` is taken from the caller as-is; it is not derived from the
    stored score rules.
    """

    def __init__(
        self,
        calls: CallRepository,
        students: StudentRepository,
        *,
        rng: Optional[random.Random] = None,
    ):
        self._calls = calls
        self._students = students
        self._rng = rng or random.Random()

    @staticmethod
    def _parse_action(value: Any) -> CallAction:
        if isinstance(value, CallAction):
            return value
        try:
            return CallAction(str(value or "").strip())
        except ValueError:
            allowed = ", ".join(a.value for a in CallAction)
            raise ValidationError(f"action must be one of: {allowed}")

    @staticmethod
    def _parse_mode(value: Any) -> CallMode:
        if isinstance(value, CallMode):
            return value
        try:
            return CallMode(str(value or CallMode.RANDOM.value).strip())
        except ValueError:
            raise ValidationError("mode must be 'random' or 'queue'")

    def start(self, mode: Any = CallMode.RANDOM) -> Student:
        mode = self._parse_mode(mode)

        if mode == CallMode.RANDOM:
            student = self._students.pick_random()
        else:
            student = self._students.pick_stalest()

        if not student:
            raise NoStudentsError("There are no students yet")
        return student

    def submit(self, *, student_id: Any, action: Any, score_change: Any) -> SubmissionResult:
        student_id = require_non_empty(student_id, "student_id")
        call_action = self._parse_action(action)
        base = require_within(parse_decimal(score_change, "score_change"), "score_change", MAX_SCORE)

        with self._calls.lock_student(student_id) as locked:
            if locked is None:
                raise NotFoundError("Student not found")

            probability = read_probability(locked.read_setting(SettingKey.RANDOM_EVENT_PROBABILITY.value))
            bonus = self._rng.random() < probability

            applied = base * BONUS_MULTIPLIER if bonus else base
            applied = applied.quantize(SCORE_QUANTUM, rounding=ROUND_HALF_UP)
            new_score = locked.current_score + applied
            if abs(applied) > MAX_SCORE or abs(new_score) > MAX_SCORE:
                raise ValidationError(f"Score would leave the range -{MAX_SCORE}..{MAX_SCORE}")

            locked.apply(
                new_score=new_score,
                counters=counters_for(call_action),
                action=call_action,
                score_change=applied,
            )

        log.info(
            "call submitted: student=%s action=%s applied=%s bonus=%s new_score=%s",
            student_id,
            call_action.value,
            applied,
            bonus,
            new_score,
        )
        return SubmissionResult(applied_delta=applied, new_score=new_score, bonus_triggered=bonus)

    def recent(self, limit: int = RECENT_CALLS_LIMIT) -> Sequence[RecentCall]:
        return self._calls.recent_calls(limit)
