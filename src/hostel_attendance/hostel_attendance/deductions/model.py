from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import PersonCategory
from ..rules.model import CheckoutRule


@dataclass(frozen=True)
class NoActiveRule:
    """Returned instead of an estimate when the person has no active rule."""

    person_category: PersonCategory
    person_id: int


@dataclass(frozen=True)
class DeductionEstimate:
    duration_hours: float
    deducted_amount: float


@dataclass(frozen=True)
class DeductionPreview:
    person_category: PersonCategory
    person_id: int
    rule: CheckoutRule
    base_amount: float
    daily_rate: float
    hourly_rate: float
    estimates: tuple[DeductionEstimate, ...]
