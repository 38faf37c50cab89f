from __future__ import annotations

from datetime import date

from src.hostel_attendance.hostel_attendance.core.enums import PersonCategory
from src.hostel_attendance.hostel_attendance.ledger.model import LedgerRow
from src.hostel_attendance.hostel_attendance.statistics.aggregation import build_statistics

START = date(2026, 1, 1)
END = date(2026, 3, 31)


def _row(entry_id: int, person_id: int, day: date, amount: float) -> LedgerRow:
    return LedgerRow(
        entry_id=entry_id,
        person_category=PersonCategory.RESIDENT,
        person_id=person_id,
        person_name=f"P{person_id}",
        attendance_record_id=entry_id,
        attendance_date=day,
        location_id=1,
        checkin_time=None,
        checkout_time=None,
        checkout_duration=None,
        deducted_amount=amount,
        checkout_rule_id=None,
    )


def test_empty_ledger():
    stats = build_statistics([], start_date=START, end_date=END)

    assert stats["total_deducted_amount"] == 0.0
    assert stats["total_checkout_records"] == 0
    assert stats["average_deduction_per_checkout"] == 0.0
    assert stats["unique_persons_with_deductions"] == 0
    assert stats["by_month"] == []
    assert stats["top_persons_by_deduction"] == []
    assert stats["deduction_ranges"] == {"0-100": 0, "101-500": 0, "501-1000": 0, "1001-2000": 0, "2000+": 0}
    assert stats["period"] == {"start_date": "2026-01-01", "end_date": "2026-03-31", "location_id": None}


def test_totals_and_histogram_bounds_are_inclusive():
    rows = [
        _row(1, 1, date(2026, 1, 5), 100),
        _row(2, 2, date(2026, 1, 6), 100.01),
        _row(3, 3, date(2026, 1, 7), 500),
        _row(4, 1, date(2026, 1, 8), 1000),
        _row(5, 2, date(2026, 1, 9), 2000),
        _row(6, 3, date(2026, 1, 10), 2000.01),
    ]

    stats = build_statistics(rows, start_date=START, end_date=END)

    assert stats["total_deducted_amount"] == 5700.02
    assert stats["total_checkout_records"] == 6
    assert stats["average_deduction_per_checkout"] == 950.0
    assert stats["unique_persons_with_deductions"] == 3
    assert stats["deduction_ranges"] == {"0-100": 1, "101-500": 2, "501-1000": 1, "1001-2000": 1, "2000+": 1}
    assert sum(stats["deduction_ranges"].values()) == stats["total_checkout_records"]


def test_by_month_keeps_first_encounter_order():
    rows = [
        _row(1, 1, date(2026, 2, 3), 10),
        _row(2, 2, date(2026, 1, 20), 20),
        _row(3, 1, date(2026, 2, 4), 30),
        _row(4, 1, date(2026, 2, 5), 5),
    ]

    stats = build_statistics(rows, start_date=START, end_date=END)

    assert stats["by_month"] == [
        {"month": "2026-02", "total_deducted": 45.0, "checkout_count": 3, "unique_persons": 1},
        {"month": "2026-01", "total_deducted": 20.0, "checkout_count": 1, "unique_persons": 1},
    ]


def test_top_persons_sorted_desc_with_ties_in_encounter_order():
    totals = [(5, 50), (6, 80), (7, 50), (8, 10)]
    rows = [_row(i, pid, date(2026, 1, 1), amount) for i, (pid, amount) in enumerate(totals, start=1)]
    # 12 distinct persons; only 10 make the list.
    rows += [_row(100 + pid, pid, date(2026, 1, 2), 1) for pid in range(20, 28)]

    stats = build_statistics(rows, start_date=START, end_date=END)
    top = stats["top_persons_by_deduction"]

    assert len(top) == 10
    assert [p["person_id"] for p in top[:4]] == [6, 5, 7, 8]
    assert top[0] == {"person_id": 6, "person_name": "P6", "total_deducted": 80.0, "checkout_count": 1}
    assert [p["person_id"] for p in top[4:]] == [20, 21, 22, 23, 24, 25]


def test_ties_follow_ledger_order_not_attendance_date():
    # Entry 1 is for a later attendance date than entry 2.
    rows = [
        _row(1, 10, date(2026, 3, 5), 50),
        _row(2, 11, date(2026, 3, 2), 50),
    ]

    stats = build_statistics(rows, start_date=START, end_date=END)

    assert [p["person_id"] for p in stats["top_persons_by_deduction"]] == [10, 11]
