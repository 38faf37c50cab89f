from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PersonCategory
from .model import CheckoutFinancial, LedgerRow


class LedgerRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[CheckoutFinancial]:
        raise NotImplementedError

    def get_by_attendance_record(self, attendance_record_id: int) -> Optional[CheckoutFinancial]:
        raise NotImplementedError

    def count_for_rule(self, rule_id: int) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        category: PersonCategory,
        person_id: int,
        attendance_record_id: int,
        deducted_amount: float,
        checkout_duration: Optional[str] = None,
        checkout_rule_id: Optional[int] = None,
    ) -> int:
        """Insert an entry; raises ConflictError when the attendance record already has one."""

        raise NotImplementedError

    def update_correction(
        self,
        *,
        entry_id: int,
        checkout_duration: Optional[str],
        deducted_amount: float,
        checkout_rule_id: Optional[int],
    ) -> bool:
        raise NotImplementedError

    def list_for_person(
        self,
        category: PersonCategory,
        person_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[CheckoutFinancial]:
        raise NotImplementedError

    def rows_in_range(
        self,
        category: PersonCategory,
        *,
        start_date: date,
        end_date: date,
        location_id: Optional[int] = None,
    ) -> Sequence[LedgerRow]:
        """Entries whose attendance date lies in [start_date, end_date], in ledger insertion order."""

        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError
