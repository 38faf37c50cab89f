from __future__ import annotations

from typing import Optional, Union

from ..common.money import round_money
from ..common.validators import require_positive
from ..core.constants import PREVIEW_DURATIONS_HOURS
from ..core.enums import PersonCategory
from ..core.exceptions import NotFoundError
from ..persons.model import Person
from ..persons.repository import PersonDirectory
from ..rules.repository import CheckoutRuleRepository
from .calculator.base import RateModel
from .calculator.standard_calculator import StandardRateModel
from .model import DeductionEstimate, DeductionPreview, NoActiveRule


class DeductionPreviewService:
    """Advisory estimates of what a checkout would cost. Never writes to the ledger."""

    def __init__(
        self,
        persons: PersonDirectory,
        rules: CheckoutRuleRepository,
        *,
        rate_model: Optional[RateModel] = None,
    ):
        self._persons = persons
        self._rules = rules
        self._rates = rate_model or StandardRateModel()

    def _require_person(self, category: PersonCategory, person_id: int) -> Person:
        person = self._persons.get(category, int(person_id))
        if not person:
            raise NotFoundError(f"{category.value} {person_id} does not exist")
        return person

    def preview_deduction(
        self, category: PersonCategory, person_id: int, duration_hours: float
    ) -> Union[NoActiveRule, DeductionEstimate]:
        hours = require_positive(duration_hours, "duration_hours")
        category = PersonCategory(category)
        person = self._require_person(category, person_id)

        rule = self._rules.find_active(category, person.person_id)
        if not rule:
            return NoActiveRule(person_category=category, person_id=person.person_id)

        amount = self._rates.deduction_for_hours(person.base_amount, rule.percentage, hours)
        return DeductionEstimate(duration_hours=hours, deducted_amount=amount)

    def preview_table(self, category: PersonCategory, person_id: int) -> Union[NoActiveRule, DeductionPreview]:
        category = PersonCategory(category)
        person = self._require_person(category, person_id)

        rule = self._rules.find_active(category, person.person_id)
        if not rule:
            return NoActiveRule(person_category=category, person_id=person.person_id)

        estimates = tuple(
            DeductionEstimate(
                duration_hours=hours,
                deducted_amount=self._rates.deduction_for_hours(person.base_amount, rule.percentage, hours),
            )
            for hours in PREVIEW_DURATIONS_HOURS
        )
        return DeductionPreview(
            person_category=category,
            person_id=person.person_id,
            rule=rule,
            base_amount=person.base_amount,
            daily_rate=round_money(self._rates.daily_rate(person.base_amount)),
            hourly_rate=round_money(self._rates.hourly_rate(person.base_amount)),
            estimates=estimates,
        )
