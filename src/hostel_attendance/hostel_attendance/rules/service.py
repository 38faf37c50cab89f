from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.validators import optional_non_negative_int, require_percentage
from ..core.enums import PersonCategory
from ..core.exceptions import ConflictError, NotFoundError
from ..ledger.repository import LedgerRepository
from ..persons.repository import PersonDirectory
from .model import CheckoutRule
from .repository import CheckoutRuleRepository

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class CheckoutRuleService:
    """Registry of per-person checkout deduction percentages.

    A person has at most one active rule. Creating or activating a rule while
    another is active is rejected; nothing is deactivated implicitly.
    """

    def __init__(self, rules: CheckoutRuleRepository, persons: PersonDirectory, *, ledger: LedgerRepository):
        self._rules = rules
        self._persons = persons
        self._ledger = ledger

    def _require_rule(self, rule_id: int) -> CheckoutRule:
        rule = self._rules.get_by_id(int(rule_id))
        if not rule:
            raise NotFoundError(f"Checkout rule {rule_id} not found")
        return rule

    def _reject_if_other_active(self, category: PersonCategory, person_id: int, *, exclude_id: int | None = None) -> None:
        active = self._rules.find_active(category, person_id)
        if active and active.rule_id != exclude_id:
            logger.info("Rejected: %s %s already has active rule %s", category.value, person_id, active.rule_id)
            raise ConflictError("Person already has an active checkout rule. Deactivate it first.")

    def create(
        self,
        category: PersonCategory,
        person_id: int,
        percentage: float,
        active_after_days: Optional[int] = None,
        is_active: bool = True,
    ) -> CheckoutRule:
        category = PersonCategory(category)
        if not self._persons.get(category, int(person_id)):
            raise NotFoundError(f"{category.value} {person_id} does not exist")

        pct = require_percentage(percentage)
        days = optional_non_negative_int(active_after_days, "active_after_days")

        # Any active rule blocks creation, even of an inactive one.
        self._reject_if_other_active(category, int(person_id))

        rule_id = self._rules.create(
            category=category,
            person_id=int(person_id),
            percentage=pct,
            is_active=bool(is_active),
            active_after_days=days,
        )
        logger.info("Created checkout rule %s for %s %s (%.2f%%)", rule_id, category.value, person_id, pct)
        return self._require_rule(rule_id)

    def activate(self, rule_id: int) -> CheckoutRule:
        rule = self._require_rule(rule_id)
        if rule.is_active:
            return rule
        self._reject_if_other_active(rule.person_category, rule.person_id, exclude_id=rule.rule_id)
        self._rules.set_active(rule.rule_id, True)
        logger.info("Activated checkout rule %s", rule.rule_id)
        return self._require_rule(rule.rule_id)

    def deactivate(self, rule_id: int) -> CheckoutRule:
        rule = self._require_rule(rule_id)
        if rule.is_active:
            self._rules.set_active(rule.rule_id, False)
            logger.info("Deactivated checkout rule %s", rule.rule_id)
        return self._require_rule(rule.rule_id)

    def toggle(self, rule_id: int) -> CheckoutRule:
        rule = self._require_rule(rule_id)
        if rule.is_active:
            return self.deactivate(rule.rule_id)
        return self.activate(rule.rule_id)

    def update(self, rule_id: int, *, percentage: float = _UNSET, active_after_days: Optional[int] = _UNSET) -> CheckoutRule:
        """Edit the percentage and/or active_after_days; omitted fields keep their value."""
        rule = self._require_rule(rule_id)

        pct = rule.percentage if percentage is _UNSET else require_percentage(percentage)
        if active_after_days is _UNSET:
            days = rule.active_after_days
        else:
            days = optional_non_negative_int(active_after_days, "active_after_days")

        self._rules.update(rule.rule_id, percentage=pct, active_after_days=days)
        logger.info("Updated checkout rule %s", rule.rule_id)
        return self._require_rule(rule.rule_id)

    def delete(self, rule_id: int) -> None:
        rule = self._require_rule(rule_id)
        if self._ledger.count_for_rule(rule.rule_id) > 0:
            raise ConflictError("Cannot delete a checkout rule referenced by ledger entries")
        if not self._rules.delete(rule.rule_id):
            raise NotFoundError(f"Checkout rule {rule_id} not found")
        logger.info("Deleted checkout rule %s", rule.rule_id)

    def resolve_active(self, category: PersonCategory, person_id: int) -> Optional[CheckoutRule]:
        return self._rules.find_active(PersonCategory(category), int(person_id))

    def get(self, rule_id: int) -> CheckoutRule:
        return self._require_rule(rule_id)

    def list_for_person(self, category: PersonCategory, person_id: int) -> Sequence[CheckoutRule]:
        return self._rules.list_for_person(PersonCategory(category), int(person_id))
