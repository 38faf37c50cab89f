from __future__ import annotations

from datetime import date, datetime

import pandas as pd
import pytest

from src.hostel_attendance.hostel_attendance.core.enums import AttendanceStatus, PersonCategory
from src.hostel_attendance.hostel_attendance.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from src.hostel_attendance.hostel_attendance.ledger.service import EXPORT_COLUMNS, CheckoutLedgerService
from src.hostel_attendance.hostel_attendance.persons.model import Person
from tests.fakes import InMemoryAttendance, InMemoryLedger, InMemoryPersons, InMemoryRules

RESIDENT = PersonCategory.RESIDENT
STAFF = PersonCategory.STAFF


class Env:
    def __init__(self):
        self.persons = InMemoryPersons(
            Person(person_id=1, category=RESIDENT, name="Resident A", base_amount=30000),
            Person(person_id=2, category=RESIDENT, name="Resident B", base_amount=24000),
        )
        self.attendance = InMemoryAttendance()
        self.rules = InMemoryRules()
        self.ledger = InMemoryLedger(self.attendance, self.persons)
        self.svc = CheckoutLedgerService(self.ledger, self.attendance, self.rules)

    def approved_record(self, person_id: int, day: date, *, location_id: int = 1) -> int:
        return self.attendance.create(
            category=RESIDENT,
            person_id=person_id,
            location_id=location_id,
            attendance_date=day,
            checkin_time=datetime.combine(day, datetime.min.time()).replace(hour=8),
            checkout_time=datetime.combine(day, datetime.min.time()).replace(hour=18),
            status=AttendanceStatus.APPROVED,
        )


def test_record_and_duplicate_conflicts():
    env = Env()
    rule_id = env.rules.create(category=RESIDENT, person_id=1, percentage=10, is_active=True)
    record_id = env.approved_record(1, date(2026, 3, 2))

    entry = env.svc.record(RESIDENT, 1, record_id, 41.666, checkout_duration="10 hours", checkout_rule_id=rule_id)

    assert entry.deducted_amount == 41.67
    assert entry.checkout_duration == "10 hours"
    assert entry.checkout_rule_id == rule_id

    with pytest.raises(ConflictError):
        env.svc.record(RESIDENT, 1, record_id, 10)


def test_record_validates_references():
    env = Env()
    record_id = env.approved_record(1, date(2026, 3, 2))

    with pytest.raises(InvalidArgumentError):
        env.svc.record(RESIDENT, 1, record_id, -5)
    with pytest.raises(NotFoundError):
        env.svc.record(RESIDENT, 1, 999, 5)
    with pytest.raises(InvalidArgumentError):
        env.svc.record(RESIDENT, 2, record_id, 5)
    with pytest.raises(InvalidArgumentError):
        env.svc.record(STAFF, 1, record_id, 5)
    with pytest.raises(NotFoundError):
        env.svc.record(RESIDENT, 1, record_id, 5, checkout_rule_id=77)


def test_correct_updates_mutable_fields_only():
    env = Env()
    record_id = env.approved_record(1, date(2026, 3, 2))
    entry = env.svc.record(RESIDENT, 1, record_id, 100)
    rule_id = env.rules.create(category=RESIDENT, person_id=1, percentage=5, is_active=True)

    fixed = env.svc.correct(entry.entry_id, checkout_duration="2 days", deducted_amount=50, checkout_rule_id=rule_id)

    assert fixed.deducted_amount == 50
    assert fixed.checkout_duration == "2 days"
    assert fixed.checkout_rule_id == rule_id
    assert fixed.attendance_record_id == record_id

    with pytest.raises(InvalidArgumentError):
        env.svc.correct(entry.entry_id, checkout_duration=None, deducted_amount=-1, checkout_rule_id=None)
    with pytest.raises(NotFoundError):
        env.svc.correct(404, checkout_duration=None, deducted_amount=1, checkout_rule_id=None)


def test_person_summary():
    env = Env()
    env.svc.record(RESIDENT, 1, env.approved_record(1, date(2026, 3, 2)), 100)
    env.svc.record(RESIDENT, 1, env.approved_record(1, date(2026, 3, 9)), 50.5)
    env.svc.record(RESIDENT, 2, env.approved_record(2, date(2026, 3, 9)), 999)

    summary = env.svc.person_summary(RESIDENT, 1)
    assert summary.total_deducted == 150.5
    assert summary.total_checkouts == 2
    assert summary.average_deduction == 75.25

    march_first_week = env.svc.person_summary(RESIDENT, 1, start=date(2026, 3, 1), end=date(2026, 3, 7))
    assert march_first_week.total_checkouts == 1

    empty = env.svc.person_summary(STAFF, 1)
    assert empty.total_checkouts == 0
    assert empty.average_deduction == 0.0


def test_export_frame_and_excel():
    env = Env()
    env.svc.record(RESIDENT, 1, env.approved_record(1, date(2026, 3, 2), location_id=1), 100, checkout_duration="10h")
    env.svc.record(RESIDENT, 2, env.approved_record(2, date(2026, 3, 3), location_id=2), 20)

    df = env.svc.export_frame(RESIDENT, start=date(2026, 3, 1), end=date(2026, 3, 31))
    assert list(df.columns) == EXPORT_COLUMNS
    assert df["Name"].tolist() == ["Resident A", "Resident B"]
    assert df["Date"].tolist() == ["2026-03-02", "2026-03-03"]

    only_block_2 = env.svc.export_frame(RESIDENT, start=date(2026, 3, 1), end=date(2026, 3, 31), location_id=2)
    assert only_block_2["Person ID"].tolist() == [2]

    empty = env.svc.export_frame(RESIDENT, start=date(2026, 4, 1), end=date(2026, 4, 30))
    assert empty.empty
    assert list(empty.columns) == EXPORT_COLUMNS

    output = env.svc.export_excel(RESIDENT, start=date(2026, 3, 1), end=date(2026, 3, 31))
    back = pd.read_excel(output, sheet_name="CheckoutDeductions", engine="openpyxl")
    assert back["Deducted"].tolist() == [100, 20]


def test_delete_entry():
    env = Env()
    entry = env.svc.record(RESIDENT, 1, env.approved_record(1, date(2026, 3, 2)), 10)

    env.svc.delete(entry.entry_id)

    with pytest.raises(NotFoundError):
        env.svc.get(entry.entry_id)
    with pytest.raises(NotFoundError):
        env.svc.delete(entry.entry_id)
