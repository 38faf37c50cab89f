from __future__ import annotations

import pytest

from src.hostel_attendance.hostel_attendance.core.enums import PersonCategory
from src.hostel_attendance.hostel_attendance.core.exceptions import InvalidArgumentError, NotFoundError
from src.hostel_attendance.hostel_attendance.deductions.model import DeductionEstimate, DeductionPreview, NoActiveRule
from src.hostel_attendance.hostel_attendance.deductions.service import DeductionPreviewService
from src.hostel_attendance.hostel_attendance.persons.model import Person
from src.hostel_attendance.hostel_attendance.rules.service import CheckoutRuleService
from tests.fakes import InMemoryAttendance, InMemoryLedger, InMemoryPersons, InMemoryRules

RESIDENT = PersonCategory.RESIDENT
STAFF = PersonCategory.STAFF


def _services():
    persons = InMemoryPersons(
        Person(person_id=1, category=RESIDENT, name="Resident A", base_amount=30000),
        Person(person_id=4, category=STAFF, name="Staff C", base_amount=0),
    )
    rules = InMemoryRules()
    rule_service = CheckoutRuleService(rules, persons, ledger=InMemoryLedger(InMemoryAttendance()))
    return DeductionPreviewService(persons, rules), rule_service


def test_preview_for_eight_hours():
    preview, rules = _services()
    rules.create(RESIDENT, 1, 10)

    est = preview.preview_deduction(RESIDENT, 1, 8)

    assert isinstance(est, DeductionEstimate)
    assert est.duration_hours == 8
    assert est.deducted_amount == 33.33


def test_preview_table_uses_canonical_durations():
    preview, rules = _services()
    rule = rules.create(RESIDENT, 1, 100)

    table = preview.preview_table(RESIDENT, 1)

    assert isinstance(table, DeductionPreview)
    assert table.rule == rule
    assert table.base_amount == 30000
    assert table.daily_rate == 1000.0
    assert table.hourly_rate == 41.67
    assert [e.duration_hours for e in table.estimates] == [1, 2, 4, 8, 12, 24]
    assert table.estimates[3].deducted_amount == 333.33
    assert table.estimates[-1].deducted_amount == 1000.0


def test_deactivated_rule_reports_no_active_rule_not_zero():
    preview, rules = _services()
    rule = rules.create(RESIDENT, 1, 10)
    rules.deactivate(rule.rule_id)

    assert rules.resolve_active(RESIDENT, 1) is None
    result = preview.preview_deduction(RESIDENT, 1, 8)
    assert result == NoActiveRule(person_category=RESIDENT, person_id=1)
    assert isinstance(preview.preview_table(RESIDENT, 1), NoActiveRule)


def test_zero_base_amount_is_a_zero_estimate():
    preview, rules = _services()
    rules.create(STAFF, 4, 50)

    est = preview.preview_deduction(STAFF, 4, 12)

    assert isinstance(est, DeductionEstimate)
    assert est.deducted_amount == 0.0


@pytest.mark.parametrize("hours", [0, -1])
def test_non_positive_duration_is_invalid(hours):
    preview, rules = _services()
    rules.create(RESIDENT, 1, 10)

    with pytest.raises(InvalidArgumentError):
        preview.preview_deduction(RESIDENT, 1, hours)


def test_unknown_person_is_not_found():
    preview, _ = _services()

    with pytest.raises(NotFoundError):
        preview.preview_deduction(RESIDENT, 42, 1)
