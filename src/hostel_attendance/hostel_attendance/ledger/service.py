from __future__ import annotations

import io
import logging
from datetime import date
from typing import Optional, Sequence

import pandas as pd

from ..attendance.repository import AttendanceRepository
from ..common.money import round_money
from ..common.validators import require_date_range, require_non_negative
from ..core.enums import PersonCategory
from ..core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from ..rules.repository import CheckoutRuleRepository
from .model import CheckoutFinancial, PersonDeductionSummary
from .repository import LedgerRepository

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "Entry ID",
    "Person ID",
    "Name",
    "Date",
    "Location",
    "Check-in",
    "Check-out",
    "Duration",
    "Deducted",
    "Rule ID",
]


class CheckoutLedgerService:
    """Checkout financial entries: at most one per attendance record.

    Entries are only written here, on explicit request; attendance
    transitions never create them.
    """

    def __init__(
        self,
        ledger: LedgerRepository,
        attendance: AttendanceRepository,
        rules: CheckoutRuleRepository,
    ):
        self._ledger = ledger
        self._attendance = attendance
        self._rules = rules

    def _require_entry(self, entry_id: int) -> CheckoutFinancial:
        entry = self._ledger.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError(f"Checkout financial entry {entry_id} not found")
        return entry

    def _require_rule_exists(self, rule_id: Optional[int]) -> Optional[int]:
        if rule_id is None:
            return None
        if not self._rules.get_by_id(int(rule_id)):
            raise NotFoundError(f"Checkout rule {rule_id} not found")
        return int(rule_id)

    def record(
        self,
        category: PersonCategory,
        person_id: int,
        attendance_record_id: int,
        deducted_amount: float,
        checkout_duration: Optional[str] = None,
        checkout_rule_id: Optional[int] = None,
    ) -> CheckoutFinancial:
        category = PersonCategory(category)
        amount = round_money(require_non_negative(deducted_amount, "deducted_amount"))

        record = self._attendance.get_by_id(int(attendance_record_id))
        if not record:
            raise NotFoundError(f"Attendance record {attendance_record_id} not found")
        if record.person_category != category or record.person_id != int(person_id):
            raise InvalidArgumentError("Attendance record does not belong to this person")

        rule_id = self._require_rule_exists(checkout_rule_id)

        if self._ledger.get_by_attendance_record(record.record_id):
            raise ConflictError("A checkout financial entry already exists for this attendance record")

        entry_id = self._ledger.create(
            category=category,
            person_id=int(person_id),
            attendance_record_id=record.record_id,
            deducted_amount=amount,
            checkout_duration=checkout_duration,
            checkout_rule_id=rule_id,
        )
        logger.info(
            "Recorded deduction %.2f for %s %s (attendance %s, entry %s)",
            amount, category.value, person_id, record.record_id, entry_id,
        )
        return self._require_entry(entry_id)

    def correct(
        self,
        entry_id: int,
        *,
        checkout_duration: Optional[str],
        deducted_amount: float,
        checkout_rule_id: Optional[int],
    ) -> CheckoutFinancial:
        entry = self._require_entry(entry_id)
        amount = round_money(require_non_negative(deducted_amount, "deducted_amount"))
        rule_id = self._require_rule_exists(checkout_rule_id)

        self._ledger.update_correction(
            entry_id=entry.entry_id,
            checkout_duration=checkout_duration,
            deducted_amount=amount,
            checkout_rule_id=rule_id,
        )
        logger.info("Corrected checkout financial entry %s: %.2f -> %.2f", entry.entry_id, entry.deducted_amount, amount)
        return self._require_entry(entry.entry_id)

    def get(self, entry_id: int) -> CheckoutFinancial:
        return self._require_entry(entry_id)

    def list_for_person(
        self,
        category: PersonCategory,
        person_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[CheckoutFinancial]:
        if start and end:
            require_date_range(start, end)
        return self._ledger.list_for_person(PersonCategory(category), int(person_id), start_date=start, end_date=end)

    def person_summary(
        self,
        category: PersonCategory,
        person_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> PersonDeductionSummary:
        entries = self.list_for_person(category, person_id, start=start, end=end)
        total = sum(e.deducted_amount for e in entries)
        count = len(entries)
        return PersonDeductionSummary(
            total_deducted=round_money(total),
            total_checkouts=count,
            average_deduction=round_money(total / count) if count else 0.0,
        )

    def export_frame(
        self,
        category: PersonCategory,
        *,
        start: date,
        end: date,
        location_id: Optional[int] = None,
    ) -> pd.DataFrame:
        require_date_range(start, end)
        rows = self._ledger.rows_in_range(PersonCategory(category), start_date=start, end_date=end, location_id=location_id)

        data = []
        for r in rows:
            data.append(
                {
                    "Entry ID": r.entry_id,
                    "Person ID": r.person_id,
                    "Name": r.person_name or "Unknown",
                    "Date": r.attendance_date.strftime("%Y-%m-%d"),
                    "Location": r.location_id,
                    "Check-in": r.checkin_time.strftime("%Y-%m-%d %H:%M") if r.checkin_time else "",
                    "Check-out": r.checkout_time.strftime("%Y-%m-%d %H:%M") if r.checkout_time else "",
                    "Duration": r.checkout_duration or "",
                    "Deducted": r.deducted_amount,
                    "Rule ID": r.checkout_rule_id,
                }
            )

        return pd.DataFrame(data, columns=EXPORT_COLUMNS)

    def export_excel(
        self,
        category: PersonCategory,
        *,
        start: date,
        end: date,
        location_id: Optional[int] = None,
    ) -> io.BytesIO:
        """Ledger export as an in-memory .xlsx, never written to disk."""
        df = self.export_frame(category, start=start, end=end, location_id=location_id)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="CheckoutDeductions")

        output.seek(0)
        logger.info("Exported %d ledger rows for %s (%s..%s)", len(df), PersonCategory(category).value, start, end)
        return output

    def delete(self, entry_id: int) -> None:
        entry = self._require_entry(entry_id)
        if not self._ledger.delete(entry.entry_id):
            raise NotFoundError(f"Checkout financial entry {entry_id} not found")
        logger.info("Deleted checkout financial entry %s", entry.entry_id)
