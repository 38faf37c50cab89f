from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import InvalidArgumentError, ValidationError


def _as_number(value, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def require_percentage(value: float, field_name: str = "percentage") -> float:
    pct = _as_number(value, field_name)
    if not 0 <= pct <= 100:
        raise InvalidArgumentError(f"{field_name} must be between 0 and 100")
    return pct


def require_non_negative(value: float, field_name: str) -> float:
    amount = _as_number(value, field_name)
    if amount < 0:
        raise InvalidArgumentError(f"{field_name} must not be negative")
    return amount


def require_positive(value: float, field_name: str) -> float:
    amount = _as_number(value, field_name)
    if amount <= 0:
        raise InvalidArgumentError(f"{field_name} must be greater than 0")
    return amount


def optional_non_negative_int(value: Optional[int], field_name: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer")
    if value < 0:
        raise InvalidArgumentError(f"{field_name} must not be negative")
    return value


def require_date_range(start: date, end: date) -> None:
    if end < start:
        raise InvalidArgumentError("end date must be on or after start date")
