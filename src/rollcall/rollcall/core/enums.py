from __future__ import annotations

from enum import Enum


class CallAction(str, Enum):
    """Outcome tag recorded for a single roll-call."""

    ARRIVE = "arrive"
    ABSENT = "absent"
    REPEAT_CORRECT = "repeat-correct"
    REPEAT_WRONG = "repeat-wrong"
    ANSWER_EXCELLENT = "answer-excellent"
    ANSWER_GOOD = "answer-good"
    ANSWER_AVERAGE = "answer-average"
    ANSWER_POOR = "answer-poor"


class CallMode(str, Enum):
    """How the next student is picked for a roll-call."""

    RANDOM = "random"
    QUEUE = "queue"


class Counter(str, Enum):
    """Per-student call statistics columns."""

    TOTAL_CALLS = "total_calls"
    ARRIVED_CALLS = "arrived_calls"
    CORRECT_ANSWERS = "correct_answers"
    TRANSFER_RIGHTS = "transfer_rights"


class SettingKey(str, Enum):
    SCORE_RULES = "score_rules"
    RANDOM_EVENT_PROBABILITY = "random_event_probability"
