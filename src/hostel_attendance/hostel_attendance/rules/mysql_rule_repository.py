from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import PersonCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import CheckoutRule
from .repository import CheckoutRuleRepository

_ACTIVE_RULE_CONFLICT = "Person already has an active checkout rule"


def _to_rule(r: Dict[str, Any]) -> CheckoutRule:
    return CheckoutRule(
        rule_id=int(r["id"]),
        person_category=PersonCategory(r["person_category"]),
        person_id=int(r["person_id"]),
        percentage=as_float(r["percentage"]),
        is_active=bool(r["is_active"]),
        active_after_days=int(r["active_after_days"]) if r.get("active_after_days") is not None else None,
        created_at=r.get("created_at"),
    )


class MySQLCheckoutRuleRepository(CheckoutRuleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, rule_id: int) -> Optional[CheckoutRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM checkout_rules WHERE id=%s", (int(rule_id),))
            r = fetchone(cur)
            return _to_rule(r) if r else None

    def find_active(self, category: PersonCategory, person_id: int) -> Optional[CheckoutRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM checkout_rules
                WHERE person_category=%s AND person_id=%s AND is_active=1
                LIMIT 1
                """,
                (category.value, int(person_id)),
            )
            r = fetchone(cur)
            return _to_rule(r) if r else None

    def list_for_person(self, category: PersonCategory, person_id: int) -> Sequence[CheckoutRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM checkout_rules
                WHERE person_category=%s AND person_id=%s
                ORDER BY created_at DESC, id DESC
                """,
                (category.value, int(person_id)),
            )
            return [_to_rule(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        category: PersonCategory,
        person_id: int,
        percentage: float,
        is_active: bool,
        active_after_days: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory, conflict_message=_ACTIVE_RULE_CONFLICT) as (_, cur):
            cur.execute(
                """
                INSERT INTO checkout_rules(person_category, person_id, is_active, active_after_days, percentage)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (category.value, int(person_id), 1 if is_active else 0, active_after_days, percentage),
            )
            return int(cur.lastrowid)

    def set_active(self, rule_id: int, is_active: bool) -> bool:
        with db_cursor(self._conn_factory, conflict_message=_ACTIVE_RULE_CONFLICT) as (_, cur):
            cur.execute(
                "UPDATE checkout_rules SET is_active=%s WHERE id=%s",
                (1 if is_active else 0, int(rule_id)),
            )
            return cur.rowcount > 0

    def update(self, rule_id: int, *, percentage: float, active_after_days: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE checkout_rules SET percentage=%s, active_after_days=%s WHERE id=%s",
                (percentage, active_after_days, int(rule_id)),
            )
            return cur.rowcount > 0

    def delete(self, rule_id: int) -> bool:
        with db_cursor(self._conn_factory, conflict_message="Rule is referenced by ledger entries") as (_, cur):
            cur.execute("DELETE FROM checkout_rules WHERE id=%s", (int(rule_id),))
            return cur.rowcount > 0
