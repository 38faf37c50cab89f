from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import PersonCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import CheckoutFinancial, LedgerRow
from .repository import LedgerRepository

_DUPLICATE_ENTRY = "A checkout financial entry already exists for this attendance record"


def _to_entry(r: Dict[str, Any]) -> CheckoutFinancial:
    return CheckoutFinancial(
        entry_id=int(r["id"]),
        person_category=PersonCategory(r["person_category"]),
        person_id=int(r["person_id"]),
        attendance_record_id=int(r["attendance_record_id"]),
        deducted_amount=as_float(r["deducted_amount"]),
        checkout_duration=r.get("checkout_duration"),
        checkout_rule_id=int(r["checkout_rule_id"]) if r.get("checkout_rule_id") is not None else None,
        created_at=r.get("created_at"),
    )


def _to_row(r: Dict[str, Any]) -> LedgerRow:
    return LedgerRow(
        entry_id=int(r["id"]),
        person_category=PersonCategory(r["person_category"]),
        person_id=int(r["person_id"]),
        person_name=r.get("person_name"),
        attendance_record_id=int(r["attendance_record_id"]),
        attendance_date=r["attendance_date"],
        location_id=int(r["location_id"]),
        checkin_time=r.get("checkin_time"),
        checkout_time=r.get("checkout_time"),
        checkout_duration=r.get("checkout_duration"),
        deducted_amount=as_float(r["deducted_amount"]),
        checkout_rule_id=int(r["checkout_rule_id"]) if r.get("checkout_rule_id") is not None else None,
        created_at=r.get("created_at"),
    )


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[CheckoutFinancial]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM checkout_financials WHERE id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def get_by_attendance_record(self, attendance_record_id: int) -> Optional[CheckoutFinancial]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM checkout_financials WHERE attendance_record_id=%s",
                (int(attendance_record_id),),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def count_for_rule(self, rule_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS cnt FROM checkout_financials WHERE checkout_rule_id=%s",
                (int(rule_id),),
            )
            r = fetchone(cur)
            return int(r["cnt"]) if r else 0

    def create(
        self,
        *,
        category: PersonCategory,
        person_id: int,
        attendance_record_id: int,
        deducted_amount: float,
        checkout_duration: Optional[str] = None,
        checkout_rule_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory, conflict_message=_DUPLICATE_ENTRY) as (_, cur):
            cur.execute(
                """
                INSERT INTO checkout_financials(
                    person_category, person_id, attendance_record_id,
                    checkout_duration, deducted_amount, checkout_rule_id
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    category.value,
                    int(person_id),
                    int(attendance_record_id),
                    checkout_duration,
                    deducted_amount,
                    checkout_rule_id,
                ),
            )
            return int(cur.lastrowid)

    def update_correction(
        self,
        *,
        entry_id: int,
        checkout_duration: Optional[str],
        deducted_amount: float,
        checkout_rule_id: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE checkout_financials
                SET checkout_duration=%s, deducted_amount=%s, checkout_rule_id=%s
                WHERE id=%s
                """,
                (checkout_duration, deducted_amount, checkout_rule_id, int(entry_id)),
            )
            return cur.rowcount > 0

    def list_for_person(
        self,
        category: PersonCategory,
        person_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[CheckoutFinancial]:
        clauses = ["cf.person_category=%s", "cf.person_id=%s"]
        params: list[object] = [category.value, int(person_id)]
        if start_date is not None:
            clauses.append("ar.date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("ar.date <= %s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT cf.*
                FROM checkout_financials cf
                JOIN attendance_records ar ON ar.id = cf.attendance_record_id
                WHERE {" AND ".join(clauses)}
                ORDER BY cf.created_at DESC, cf.id DESC
                """,
                tuple(params),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def rows_in_range(
        self,
        category: PersonCategory,
        *,
        start_date: date,
        end_date: date,
        location_id: Optional[int] = None,
    ) -> Sequence[LedgerRow]:
        if category == PersonCategory.RESIDENT:
            name_join = "LEFT JOIN students p ON p.id = cf.person_id"
            name_col = "p.name"
        else:
            name_join = "LEFT JOIN staff p ON p.id = cf.person_id"
            name_col = "p.staff_name"

        clauses = ["cf.person_category=%s", "ar.date BETWEEN %s AND %s"]
        params: list[object] = [category.value, start_date, end_date]
        if location_id is not None:
            clauses.append("ar.location_id=%s")
            params.append(int(location_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    cf.id, cf.person_category, cf.person_id, {name_col} AS person_name,
                    cf.attendance_record_id, ar.date AS attendance_date, ar.location_id,
                    ar.checkin_time, ar.checkout_time,
                    cf.checkout_duration, cf.deducted_amount, cf.checkout_rule_id, cf.created_at
                FROM checkout_financials cf
                JOIN attendance_records ar ON ar.id = cf.attendance_record_id
                {name_join}
                WHERE {" AND ".join(clauses)}
                ORDER BY cf.id ASC
                """,
                tuple(params),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM checkout_financials WHERE id=%s", (int(entry_id),))
            return cur.rowcount > 0
