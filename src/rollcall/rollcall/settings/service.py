from __future__ import annotations

import json
import math
from typing import Any, Optional

from ..common.logging import get_logger
from ..common.validators import parse_decimal, parse_probability, require_within
from ..core.constants import DEFAULT_RANDOM_EVENT_PROBABILITY, MAX_SCORE
from ..core.enums import CallAction, SettingKey
from ..core.exceptions import ValidationError
from .repository import SettingsRepository

log = get_logger(__name__)


def read_probability(raw: Optional[str]) -> float:
    """Bonus probability stored in settings, or the default when absent/unparsable."""

    if raw is None:
        return DEFAULT_RANDOM_EVENT_PROBABILITY
    try:
        value = float(str(raw).strip())
    except ValueError:
        return DEFAULT_RANDOM_EVENT_PROBABILITY
    if math.isnan(value):
        return DEFAULT_RANDOM_EVENT_PROBABILITY
    return value


def _decode(raw: Optional[str]) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _as_json_number(value: Any, field_name: str):
    number = require_within(parse_decimal(value, field_name), field_name, MAX_SCORE)
    return int(number) if number == number.to_integral_value() else float(number)


class SettingsService:
    """Use cases: read and change service settings."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_settings(self) -> dict[str, Any]:
        return {key: _decode(raw) for key, raw in self._settings.get_all().items()}

    def update_settings(self, *, score_rules: Any = None, random_event_probability: Any = None) -> None:
        if score_rules is None and random_event_probability is None:
            raise ValidationError("Nothing to update: send score_rules and/or random_event_probability")

        values: dict[str, str] = {}

        if score_rules is not None:
            if not isinstance(score_rules, dict):
                raise ValidationError("score_rules must be an object mapping actions to scores")
            known = {a.value for a in CallAction}
            unknown = sorted(k for k in score_rules if k not in known)
            if unknown:
                raise ValidationError(f"Unknown actions in score_rules: {', '.join(unknown)}")
            rules = {k: _as_json_number(v, f"score_rules.{k}") for k, v in score_rules.items()}
            values[SettingKey.SCORE_RULES.value] = json.dumps(rules)

        if random_event_probability is not None:
            p = parse_probability(random_event_probability, "random_event_probability")
            values[SettingKey.RANDOM_EVENT_PROBABILITY.value] = str(p)

        self._settings.save(values)
        log.info("settings updated: %s", ", ".join(sorted(values)))
