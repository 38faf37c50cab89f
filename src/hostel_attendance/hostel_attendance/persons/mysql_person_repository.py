from __future__ import annotations

from typing import Optional

from ..core.enums import PersonCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchone
from .model import Person
from .repository import PersonDirectory


class MySQLPersonDirectory(PersonDirectory):
    """Reads residents from `students` and staff from `staff`.

    A resident's base amount is the monthly fee of their most recent
    financial row; residents without one have a base amount of 0.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, category: PersonCategory, person_id: int) -> Optional[Person]:
        if category == PersonCategory.RESIDENT:
            return self._get_resident(int(person_id))
        return self._get_staff(int(person_id))

    def _get_resident(self, person_id: int) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.name,
                       (SELECT sf.monthly_fee
                        FROM student_financials sf
                        WHERE sf.student_id = s.id
                        ORDER BY sf.created_at DESC, sf.id DESC
                        LIMIT 1) AS monthly_fee
                FROM students s
                WHERE s.id=%s
                """,
                (person_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Person(
                person_id=int(r["id"]),
                category=PersonCategory.RESIDENT,
                name=r["name"],
                base_amount=as_float(r.get("monthly_fee")),
            )

    def _get_staff(self, person_id: int) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, staff_name, salary_amount FROM staff WHERE id=%s",
                (person_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Person(
                person_id=int(r["id"]),
                category=PersonCategory.STAFF,
                name=r["staff_name"],
                base_amount=as_float(r.get("salary_amount")),
            )
