from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_date_range
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, PersonCategory
from ..core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from ..ledger.repository import LedgerRepository
from ..persons.model import Person
from ..persons.repository import PersonDirectory
from .factory import CheckoutPolicyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Presence lifecycle of residents and staff.

    checked_in -> pending -> approved (resident) | checked_out (staff)
    pending -> declined (resident) | checked_in (staff, checkout undone)

    Nothing moves on its own; every transition is one of the calls below.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        persons: PersonDirectory,
        *,
        ledger: LedgerRepository | None = None,
        policy_factory: CheckoutPolicyFactory | None = None,
    ):
        self._attendance = attendance
        self._persons = persons
        self._ledger = ledger
        self._policies = policy_factory or CheckoutPolicyFactory()

    def _require_person(self, category: PersonCategory, person_id: int) -> Person:
        person = self._persons.get(category, int(person_id))
        if not person:
            raise NotFoundError(f"{category.value} {person_id} does not exist")
        return person

    def _require_record(self, record_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(record_id))
        if not record:
            raise NotFoundError(f"Attendance record {record_id} not found")
        return record

    def _reject_if_incomplete_exists(
        self, category: PersonCategory, person_id: int, attendance_date: date, *, exclude_id: int | None = None
    ) -> None:
        existing = self._attendance.find_incomplete(category, int(person_id), attendance_date)
        if existing and existing.record_id != exclude_id:
            logger.info(
                "Rejected: %s %s already has incomplete record %s on %s",
                category.value, person_id, existing.record_id, attendance_date,
            )
            raise ConflictError(
                "Person has an incomplete check-in/check-out record for this date. Please complete it first."
            )

    def check_in(
        self,
        category: PersonCategory,
        person_id: int,
        *,
        location_id: int,
        checkin_time: datetime | None = None,
        remarks: str | None = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        category = PersonCategory(category)
        self._require_person(category, person_id)

        checkin_time = checkin_time or now or now_local()
        attendance_date = checkin_time.date()
        self._reject_if_incomplete_exists(category, person_id, attendance_date)

        record_id = self._attendance.create(
            category=category,
            person_id=int(person_id),
            location_id=int(location_id),
            attendance_date=attendance_date,
            checkin_time=checkin_time,
            checkout_time=None,
            status=AttendanceStatus.CHECKED_IN,
            remarks=remarks,
        )
        logger.info("%s %s checked in at location %s (record %s)", category.value, person_id, location_id, record_id)
        return self._require_record(record_id)

    def create_record(
        self,
        category: PersonCategory,
        person_id: int,
        *,
        location_id: int,
        attendance_date: date,
        checkin_time: datetime | None = None,
        checkout_time: datetime | None = None,
        remarks: str | None = None,
        estimated_checkin_date: date | None = None,
    ) -> AttendanceRecord:
        """Administrative creation.

        A record entered with both times is a checkout that still needs review,
        so it starts in `pending`.
        """
        category = PersonCategory(category)
        self._require_person(category, person_id)

        if checkin_time and checkout_time and checkout_time < checkin_time:
            raise InvalidArgumentError("Check-out time cannot be earlier than check-in time")

        self._reject_if_incomplete_exists(category, person_id, attendance_date)

        status = AttendanceStatus.PENDING if (checkin_time and checkout_time) else AttendanceStatus.CHECKED_IN
        record_id = self._attendance.create(
            category=category,
            person_id=int(person_id),
            location_id=int(location_id),
            attendance_date=attendance_date,
            checkin_time=checkin_time,
            checkout_time=checkout_time,
            status=status,
            remarks=remarks,
            estimated_checkin_date=estimated_checkin_date,
        )
        logger.info("Created %s record %s for %s %s", status.value, record_id, category.value, person_id)
        return self._require_record(record_id)

    def request_checkout(
        self,
        category: PersonCategory,
        person_id: int,
        *,
        checkout_time: datetime | None = None,
        estimated_checkin_date: date | None = None,
        remarks: str | None = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        category = PersonCategory(category)
        now = now or now_local()

        record = self._attendance.find_open_checkin(category, int(person_id), now.date())
        if not record:
            raise NotFoundError("No open check-in found for today")

        checkout_time = checkout_time or now
        if record.checkin_time and checkout_time < record.checkin_time:
            raise InvalidArgumentError("Check-out time cannot be earlier than check-in time")

        ok = self._attendance.update_checkout_request(
            record_id=record.record_id,
            checkout_time=checkout_time,
            status=AttendanceStatus.PENDING,
            estimated_checkin_date=estimated_checkin_date or record.estimated_checkin_date,
            remarks=remarks or record.remarks,
        )
        if not ok:
            raise NotFoundError(f"Attendance record {record.record_id} not found")

        logger.info("Checkout requested for %s %s (record %s)", category.value, person_id, record.record_id)
        return self._require_record(record.record_id)

    def approve(self, record_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        record = self._require_record(record_id)
        if record.status != AttendanceStatus.PENDING:
            raise ConflictError(f"Only pending records can be approved (current: {record.status.value})")

        policy = self._policies.for_category(record.person_category)
        decision = policy.approve(record=record, now=now or now_local())
        self._attendance.update_decision(
            record_id=record.record_id,
            status=decision.status,
            checkout_time=decision.checkout_time,
            remarks=decision.remarks,
        )
        logger.info("Approved checkout record %s -> %s", record.record_id, decision.status.value)
        return self._require_record(record.record_id)

    def decline(self, record_id: int, reason: str | None = None) -> AttendanceRecord:
        record = self._require_record(record_id)
        if record.status != AttendanceStatus.PENDING:
            raise ConflictError(f"Only pending records can be declined (current: {record.status.value})")

        reason = (reason or "").strip() or None
        policy = self._policies.for_category(record.person_category)
        decision = policy.decline(record=record, reason=reason)

        if decision.checkout_time is None:
            # Reverting reopens the record; another open record that day would break the invariant.
            self._reject_if_incomplete_exists(
                record.person_category, record.person_id, record.attendance_date, exclude_id=record.record_id
            )

        self._attendance.update_decision(
            record_id=record.record_id,
            status=decision.status,
            checkout_time=decision.checkout_time,
            remarks=decision.remarks,
        )
        logger.info("Declined checkout record %s -> %s", record.record_id, decision.status.value)
        return self._require_record(record.record_id)

    def get_record(self, record_id: int) -> AttendanceRecord:
        return self._require_record(record_id)

    def today_attendance(
        self, category: PersonCategory, *, location_id: int | None = None, today: date | None = None
    ) -> Sequence[AttendanceRecord]:
        today = today or now_local().date()
        return self._attendance.list_for_date(PersonCategory(category), today, location_id=location_id)

    def history(
        self, category: PersonCategory, person_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_person(PersonCategory(category), int(person_id), int(limit))

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
        require_date_range(start_date, end_date)
        return self._attendance.list_records(
            PersonCategory(category),
            start_date=start_date,
            end_date=end_date,
            person_id=person_id,
            location_id=location_id,
            status=AttendanceStatus(status) if status else None,
        )

    def delete_record(self, record_id: int) -> None:
        record = self._require_record(record_id)
        if self._ledger and self._ledger.get_by_attendance_record(record.record_id):
            raise ConflictError("Cannot delete a record that has a checkout financial entry")
        if not self._attendance.delete(record.record_id):
            raise NotFoundError(f"Attendance record {record_id} not found")
        logger.info("Deleted attendance record %s", record.record_id)
