from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None:
        raise ValidationError(f"{field_name} is required")
    text = str(value).strip()
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def parse_decimal(value: Any, field_name: str) -> Decimal:
    """Parse a JSON number or numeric string into a finite Decimal."""

    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        # str() first so floats like 0.1 keep their short repr.
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return number


def parse_probability(value: Any, field_name: str) -> float:
    number = parse_decimal(value, field_name)
    if number < 0 or number > 1:
        raise ValidationError(f"{field_name} must be between 0 and 1")
    return float(number)


def require_within(number: Decimal, field_name: str, limit: Decimal) -> Decimal:
    if abs(number) > limit:
        raise ValidationError(f"{field_name} must be between -{limit} and {limit}")
    return number
