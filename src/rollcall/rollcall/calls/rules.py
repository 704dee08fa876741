"""Which statistics a roll-call outcome counts towards."""

from __future__ import annotations

from ..core.enums import CallAction, Counter

_ALWAYS = frozenset({Counter.TOTAL_CALLS})
_ARRIVED = _ALWAYS | {Counter.ARRIVED_CALLS}
_CORRECT = _ALWAYS | {Counter.CORRECT_ANSWERS}

ACTION_COUNTERS: dict[CallAction, frozenset[Counter]] = {
    CallAction.ARRIVE: _ARRIVED,
    CallAction.ABSENT: _ALWAYS,
    CallAction.REPEAT_CORRECT: _CORRECT,
    CallAction.REPEAT_WRONG: _ALWAYS,
    CallAction.ANSWER_EXCELLENT: _CORRECT,
    CallAction.ANSWER_GOOD: _CORRECT,
    CallAction.ANSWER_AVERAGE: _CORRECT,
    CallAction.ANSWER_POOR: _CORRECT,
}


def counters_for(action: CallAction) -> frozenset[Counter]:
    return ACTION_COUNTERS[action]
