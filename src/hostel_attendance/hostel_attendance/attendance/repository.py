from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, PersonCategory
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_incomplete(
        self, category: PersonCategory, person_id: int, attendance_date: date
    ) -> Optional[AttendanceRecord]:
        """Any record for the person/day missing either timestamp."""

        raise NotImplementedError

    def find_open_checkin(
        self, category: PersonCategory, person_id: int, attendance_date: date
    ) -> Optional[AttendanceRecord]:
        """The checked_in record with a check-in time and no check-out time."""

        raise NotImplementedError

    def create(
        self,
        *,
        category: PersonCategory,
        person_id: int,
        location_id: int,
        attendance_date: date,
        checkin_time: Optional[datetime],
        checkout_time: Optional[datetime],
        status: AttendanceStatus,
        remarks: Optional[str] = None,
        estimated_checkin_date: Optional[date] = None,
    ) -> int:
        """Insert a record; raises ConflictError when the storage rejects a second open record."""

        raise NotImplementedError

    def update_checkout_request(
        self,
        *,
        record_id: int,
        checkout_time: datetime,
        status: AttendanceStatus,
        estimated_checkin_date: Optional[date] = None,
        remarks: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def update_decision(
        self,
        *,
        record_id: int,
        status: AttendanceStatus,
        checkout_time: Optional[datetime],
        remarks: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def list_for_date(
        self, category: PersonCategory, attendance_date: date, *, location_id: Optional[int] = None
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_person(self, category: PersonCategory, person_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_records(
        self,
        category: PersonCategory,
        *,
        start_date: date,
        end_date: date,
        person_id: Optional[int] = None,
        location_id: Optional[int] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def delete(self, record_id: int) -> bool:
        raise NotImplementedError
