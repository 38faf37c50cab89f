from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PersonCategory


@dataclass(frozen=True)
class CheckoutFinancial:
    entry_id: int
    person_category: PersonCategory
    person_id: int
    attendance_record_id: int
    deducted_amount: float
    checkout_duration: Optional[str] = None
    checkout_rule_id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LedgerRow:
    """Ledger entry joined with the attendance record it was charged for."""

    entry_id: int
    person_category: PersonCategory
    person_id: int
    person_name: Optional[str]
    attendance_record_id: int
    attendance_date: date
    location_id: int
    checkin_time: Optional[datetime]
    checkout_time: Optional[datetime]
    checkout_duration: Optional[str]
    deducted_amount: float
    checkout_rule_id: Optional[int]
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PersonDeductionSummary:
    total_deducted: float
    total_checkouts: int
    average_deduction: float
