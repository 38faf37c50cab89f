from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import PersonCategory


@dataclass(frozen=True)
class Person:
    """Resident or staff member as seen by the attendance engine.

    base_amount is the periodic amount checkout deductions are derived from:
    the monthly fee for residents, the monthly salary for staff.
    """

    person_id: int
    category: PersonCategory
    name: str
    base_amount: float = 0.0
