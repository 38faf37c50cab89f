from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus, PersonCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    id, person_category, person_id, location_id, date,
    checkin_time, checkout_time, status, remarks, estimated_checkin_date
"""

_OPEN_RECORD_CONFLICT = "Person has an incomplete check-in/check-out record for this date"


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["id"]),
        person_category=PersonCategory(r["person_category"]),
        person_id=int(r["person_id"]),
        location_id=int(r["location_id"]),
        attendance_date=r["date"],
        checkin_time=r.get("checkin_time"),
        checkout_time=r.get("checkout_time"),
        status=AttendanceStatus(r["status"]),
        remarks=r.get("remarks"),
        estimated_checkin_date=r.get("estimated_checkin_date"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_incomplete(
        self, category: PersonCategory, person_id: int, attendance_date: date
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE person_category=%s AND person_id=%s AND date=%s
                  AND (checkin_time IS NULL OR checkout_time IS NULL)
                ORDER BY id DESC
                LIMIT 1
                """,
                (category.value, int(person_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_open_checkin(
        self, category: PersonCategory, person_id: int, attendance_date: date
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE person_category=%s AND person_id=%s AND date=%s
                  AND status=%s AND checkin_time IS NOT NULL AND checkout_time IS NULL
                ORDER BY id DESC
                LIMIT 1
                """,
                (category.value, int(person_id), attendance_date, AttendanceStatus.CHECKED_IN.value),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        with db_cursor(self._conn_factory, conflict_message=_OPEN_RECORD_CONFLICT) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    person_category, person_id, location_id, date,
                    checkin_time, checkout_time, status, remarks, estimated_checkin_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    category.value,
                    int(person_id),
                    int(location_id),
                    attendance_date,
                    checkin_time,
                    checkout_time,
                    status.value,
                    remarks,
                    estimated_checkin_date,
                ),
            )
            return int(cur.lastrowid)

    def update_checkout_request(
        self,
        *,
        record_id: int,
        checkout_time: datetime,
        status: AttendanceStatus,
        estimated_checkin_date: Optional[date] = None,
        remarks: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET checkout_time=%s, status=%s, estimated_checkin_date=%s, remarks=%s
                WHERE id=%s
                """,
                (checkout_time, status.value, estimated_checkin_date, remarks, int(record_id)),
            )
            return cur.rowcount > 0

    def update_decision(
        self,
        *,
        record_id: int,
        status: AttendanceStatus,
        checkout_time: Optional[datetime],
        remarks: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory, conflict_message=_OPEN_RECORD_CONFLICT) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, checkout_time=%s, remarks=%s
                WHERE id=%s
                """,
                (status.value, checkout_time, remarks, int(record_id)),
            )
            return cur.rowcount > 0

    def list_for_date(
        self, category: PersonCategory, attendance_date: date, *, location_id: Optional[int] = None
    ) -> Sequence[AttendanceRecord]:
        clauses = ["person_category=%s", "date=%s"]
        params: list[object] = [category.value, attendance_date]
        if location_id is not None:
            clauses.append("location_id=%s")
            params.append(int(location_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                ORDER BY created_at DESC, id DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_recent_for_person(self, category: PersonCategory, person_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE person_category=%s AND person_id=%s
                ORDER BY GREATEST(
                    COALESCE(checkout_time, '1970-01-01'),
                    COALESCE(checkin_time, '1970-01-01'),
                    created_at
                ) DESC
                LIMIT %s
                """,
                (category.value, int(person_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

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
        clauses = ["person_category=%s", "date BETWEEN %s AND %s"]
        params: list[object] = [category.value, start_date, end_date]

        if person_id is not None:
            clauses.append("person_id=%s")
            params.append(int(person_id))
        if location_id is not None:
            clauses.append("location_id=%s")
            params.append(int(location_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                ORDER BY checkout_time IS NULL, checkout_time DESC, created_at DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def delete(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory, conflict_message="Record is referenced by a ledger entry") as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE id=%s", (int(record_id),))
            return cur.rowcount > 0
