from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PersonCategory
from .model import CheckoutRule


class CheckoutRuleRepository(Protocol):
    def get_by_id(self, rule_id: int) -> Optional[CheckoutRule]:
        raise NotImplementedError

    def find_active(self, category: PersonCategory, person_id: int) -> Optional[CheckoutRule]:
        raise NotImplementedError

    def list_for_person(self, category: PersonCategory, person_id: int) -> Sequence[CheckoutRule]:
        raise NotImplementedError

    def create(
        self,
        *,
        category: PersonCategory,
        person_id: int,
        percentage: float,
        is_active: bool,
        active_after_days: Optional[int] = None,
    ) -> int:
        """Insert a rule; raises ConflictError when the storage rejects a second active rule."""

        raise NotImplementedError

    def set_active(self, rule_id: int, is_active: bool) -> bool:
        raise NotImplementedError

    def update(self, rule_id: int, *, percentage: float, active_after_days: Optional[int]) -> bool:
        raise NotImplementedError

    def delete(self, rule_id: int) -> bool:
        raise NotImplementedError
