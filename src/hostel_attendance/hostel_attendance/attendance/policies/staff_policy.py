from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import AttendanceRecord
from .base import CheckoutDecision, CheckoutPolicy, append_remark


class StaffCheckoutPolicy(CheckoutPolicy):
    """Staff: approval ends in `checked_out`; a decline undoes the checkout request.

    Declining puts the record back to `checked_in`, clears the checkout time
    and keeps the reason in the remarks.
    """

    def approve(self, *, record: AttendanceRecord, now: datetime) -> CheckoutDecision:
        return CheckoutDecision(
            status=AttendanceStatus.CHECKED_OUT,
            checkout_time=record.checkout_time or now,
            remarks=record.remarks,
        )

    def decline(self, *, record: AttendanceRecord, reason: Optional[str]) -> CheckoutDecision:
        remarks = record.remarks
        if reason:
            remarks = append_remark(remarks, f"Checkout declined: {reason}")
        return CheckoutDecision(
            status=AttendanceStatus.CHECKED_IN,
            checkout_time=None,
            remarks=remarks,
        )
