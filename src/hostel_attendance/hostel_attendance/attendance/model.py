from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, PersonCategory


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one presence/checkout cycle of a person at a location."""

    record_id: int
    person_category: PersonCategory
    person_id: int
    location_id: int
    attendance_date: date
    checkin_time: Optional[datetime]
    checkout_time: Optional[datetime]
    status: AttendanceStatus
    remarks: Optional[str] = None
    estimated_checkin_date: Optional[date] = None

    @property
    def is_incomplete(self) -> bool:
        return self.checkin_time is None or self.checkout_time is None
