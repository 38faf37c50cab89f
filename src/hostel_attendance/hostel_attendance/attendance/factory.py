from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import PersonCategory
from .policies.base import CheckoutPolicy
from .policies.resident_policy import ResidentCheckoutPolicy
from .policies.staff_policy import StaffCheckoutPolicy


@dataclass
class CheckoutPolicyFactory:
    """Factory Pattern: choose the checkout policy for a person category.

    Residents and staff deliberately resolve approve/decline differently;
    both outcomes are current product behavior.
    """

    def for_category(self, category: PersonCategory) -> CheckoutPolicy:
        if PersonCategory(category) == PersonCategory.STAFF:
            return StaffCheckoutPolicy()
        return ResidentCheckoutPolicy()
