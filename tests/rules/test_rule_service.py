from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hostel_attendance.hostel_attendance.core.enums import AttendanceStatus, PersonCategory
from src.hostel_attendance.hostel_attendance.core.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    ValidationError,
)
from src.hostel_attendance.hostel_attendance.persons.model import Person
from src.hostel_attendance.hostel_attendance.rules.service import CheckoutRuleService
from tests.fakes import InMemoryAttendance, InMemoryLedger, InMemoryPersons, InMemoryRules

RESIDENT = PersonCategory.RESIDENT


def _service():
    persons = InMemoryPersons(
        Person(person_id=1, category=RESIDENT, name="Resident A", base_amount=30000),
        Person(person_id=2, category=RESIDENT, name="Resident B", base_amount=24000),
    )
    rules = InMemoryRules()
    attendance = InMemoryAttendance()
    ledger = InMemoryLedger(attendance, persons)
    return CheckoutRuleService(rules, persons, ledger=ledger), rules, attendance, ledger


def test_create_and_resolve_active():
    svc, _, _, _ = _service()

    rule = svc.create(RESIDENT, 1, 10, active_after_days=3)

    assert rule.is_active
    assert rule.percentage == 10
    assert rule.active_after_days == 3
    assert svc.resolve_active(RESIDENT, 1) == rule
    assert svc.resolve_active(RESIDENT, 2) is None


def test_second_active_rule_is_rejected_not_auto_deactivated():
    svc, _, _, _ = _service()
    first = svc.create(RESIDENT, 1, 10)

    with pytest.raises(ConflictError):
        svc.create(RESIDENT, 1, 20)

    # Even an inactive rule cannot be added while one is active.
    with pytest.raises(ConflictError):
        svc.create(RESIDENT, 1, 20, is_active=False)

    assert svc.resolve_active(RESIDENT, 1) == first


def test_activate_conflicts_with_other_active_rule():
    svc, _, _, _ = _service()
    svc.deactivate(svc.create(RESIDENT, 1, 10).rule_id)
    spare = svc.create(RESIDENT, 1, 15, is_active=False)
    current = svc.create(RESIDENT, 1, 20)

    with pytest.raises(ConflictError):
        svc.activate(spare.rule_id)

    svc.deactivate(current.rule_id)
    assert svc.activate(spare.rule_id).is_active
    assert svc.resolve_active(RESIDENT, 1).rule_id == spare.rule_id


def test_toggle_flips_and_checks_conflicts():
    svc, _, _, _ = _service()
    rule = svc.create(RESIDENT, 1, 10)

    assert svc.toggle(rule.rule_id).is_active is False
    assert svc.toggle(rule.rule_id).is_active is True


def test_create_validates_input():
    svc, _, _, _ = _service()

    with pytest.raises(NotFoundError):
        svc.create(RESIDENT, 99, 10)
    with pytest.raises(InvalidArgumentError):
        svc.create(RESIDENT, 1, 100.5)
    with pytest.raises(InvalidArgumentError):
        svc.create(RESIDENT, 1, -1)
    with pytest.raises(InvalidArgumentError):
        svc.create(RESIDENT, 1, 10, active_after_days=-2)
    with pytest.raises(ValidationError):
        svc.create(RESIDENT, 1, "ten")

    assert svc.create(RESIDENT, 1, 0).percentage == 0


def test_update_keeps_omitted_fields():
    svc, _, _, _ = _service()
    rule = svc.create(RESIDENT, 1, 10, active_after_days=5)

    updated = svc.update(rule.rule_id, percentage=12.5)
    assert updated.percentage == 12.5
    assert updated.active_after_days == 5

    cleared = svc.update(rule.rule_id, active_after_days=None)
    assert cleared.active_after_days is None
    assert cleared.percentage == 12.5

    with pytest.raises(InvalidArgumentError):
        svc.update(rule.rule_id, percentage=101)


def test_delete_blocked_by_ledger_entries():
    svc, _, attendance, ledger = _service()
    rule = svc.create(RESIDENT, 1, 10)
    record_id = attendance.create(
        category=RESIDENT,
        person_id=1,
        location_id=1,
        attendance_date=date(2026, 3, 2),
        checkin_time=datetime(2026, 3, 2, 8, 0),
        checkout_time=datetime(2026, 3, 2, 18, 0),
        status=AttendanceStatus.APPROVED,
    )
    ledger.create(
        category=RESIDENT, person_id=1, attendance_record_id=record_id, deducted_amount=41.67, checkout_rule_id=rule.rule_id
    )

    with pytest.raises(ConflictError):
        svc.delete(rule.rule_id)

    svc.deactivate(rule.rule_id)
    assert svc.resolve_active(RESIDENT, 1) is None


def test_delete_unreferenced_rule():
    svc, _, _, _ = _service()
    rule = svc.create(RESIDENT, 2, 5)

    svc.delete(rule.rule_id)

    with pytest.raises(NotFoundError):
        svc.get(rule.rule_id)
    assert svc.list_for_person(RESIDENT, 2) == []
