from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PersonCategory


@dataclass(frozen=True)
class CheckoutRule:
    rule_id: int
    person_category: PersonCategory
    person_id: int
    percentage: float
    is_active: bool = True
    active_after_days: Optional[int] = None
    created_at: Optional[datetime] = None
