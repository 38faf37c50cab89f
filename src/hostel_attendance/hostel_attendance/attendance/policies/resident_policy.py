from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import AttendanceRecord
from .base import CheckoutDecision, CheckoutPolicy


class ResidentCheckoutPolicy(CheckoutPolicy):
    """Residents: approval ends in `approved`; a decline is terminal and keeps the checkout time."""

    def approve(self, *, record: AttendanceRecord, now: datetime) -> CheckoutDecision:
        return CheckoutDecision(
            status=AttendanceStatus.APPROVED,
            checkout_time=record.checkout_time or now,
            remarks=record.remarks,
        )

    def decline(self, *, record: AttendanceRecord, reason: Optional[str]) -> CheckoutDecision:
        return CheckoutDecision(
            status=AttendanceStatus.DECLINED,
            checkout_time=record.checkout_time,
            remarks=reason or record.remarks,
        )
