from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import month_key
from ..common.money import round_money
from ..core.constants import DEDUCTION_RANGES, TOP_PERSONS_LIMIT
from ..ledger.model import LedgerRow


def _range_label(amount: float) -> str:
    for label, upper in DEDUCTION_RANGES:
        if upper is None or amount <= upper:
            return label
    return DEDUCTION_RANGES[-1][0]


def build_statistics(
    rows: Iterable[LedgerRow],
    *,
    start_date: date,
    end_date: date,
    location_id: Optional[int] = None,
    top_limit: int = TOP_PERSONS_LIMIT,
) -> dict:
    """Aggregate ledger rows into a JSON-ready statistics snapshot.

    Month buckets and person totals keep first-encounter order; the top list
    is sorted by total descending with a stable sort, so ties stay in that
    order too.
    """
    total = 0.0
    count = 0
    persons: set[int] = set()
    month_map: dict[str, dict] = {}
    person_map: dict[int, dict] = {}
    ranges = {label: 0 for label, _ in DEDUCTION_RANGES}

    for r in rows:
        amount = float(r.deducted_amount)
        total += amount
        count += 1
        persons.add(r.person_id)

        key = month_key(r.attendance_date)
        m = month_map.get(key)
        if not m:
            m = {"month": key, "total_deducted": 0.0, "checkout_count": 0, "_persons": set()}
            month_map[key] = m
        m["total_deducted"] += amount
        m["checkout_count"] += 1
        m["_persons"].add(r.person_id)

        p = person_map.get(r.person_id)
        if not p:
            p = {
                "person_id": r.person_id,
                "person_name": r.person_name,
                "total_deducted": 0.0,
                "checkout_count": 0,
            }
            person_map[r.person_id] = p
        p["total_deducted"] += amount
        p["checkout_count"] += 1

        ranges[_range_label(amount)] += 1

    by_month = []
    for m in month_map.values():
        by_month.append(
            {
                "month": m["month"],
                "total_deducted": round_money(m["total_deducted"]),
                "checkout_count": m["checkout_count"],
                "unique_persons": len(m["_persons"]),
            }
        )

    top = sorted(person_map.values(), key=lambda x: x["total_deducted"], reverse=True)[:top_limit]
    top_persons = [dict(p, total_deducted=round_money(p["total_deducted"])) for p in top]

    return {
        "total_deducted_amount": round_money(total),
        "total_checkout_records": count,
        "average_deduction_per_checkout": round_money(total / count) if count else 0.0,
        "unique_persons_with_deductions": len(persons),
        "by_month": by_month,
        "top_persons_by_deduction": top_persons,
        "deduction_ranges": ranges,
        "period": {
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "location_id": location_id,
        },
    }
