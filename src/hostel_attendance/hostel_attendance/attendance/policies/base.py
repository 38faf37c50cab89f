from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import AttendanceRecord


@dataclass(frozen=True)
class CheckoutDecision:
    """Field values an approve/decline writes back to the record."""

    status: AttendanceStatus
    checkout_time: Optional[datetime]
    remarks: Optional[str] = None


class CheckoutPolicy(ABC):
    """Strategy Pattern: what approving or declining a checkout means for a category."""

    @abstractmethod
    def approve(self, *, record: AttendanceRecord, now: datetime) -> CheckoutDecision:
        raise NotImplementedError

    @abstractmethod
    def decline(self, *, record: AttendanceRecord, reason: Optional[str]) -> CheckoutDecision:
        raise NotImplementedError


def append_remark(existing: Optional[str], addition: str) -> str:
    if not existing:
        return addition
    return f"{existing}. {addition}"
