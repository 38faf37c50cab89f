from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import CheckoutPolicyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .deductions.service import DeductionPreviewService
from .ledger.mysql_ledger_repository import MySQLLedgerRepository
from .ledger.service import CheckoutLedgerService
from .persons.mysql_person_repository import MySQLPersonDirectory
from .rules.mysql_rule_repository import MySQLCheckoutRuleRepository
from .rules.service import CheckoutRuleService
from .statistics.cache import StatisticsCache, cache_from_url
from .statistics.service import DeductionStatisticsService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    persons_repo: MySQLPersonDirectory
    attendance_repo: MySQLAttendanceRepository
    rules_repo: MySQLCheckoutRuleRepository
    ledger_repo: MySQLLedgerRepository
    statistics_cache: StatisticsCache

    attendance_service: AttendanceService
    rule_service: CheckoutRuleService
    preview_service: DeductionPreviewService
    ledger_service: CheckoutLedgerService
    statistics_service: DeductionStatisticsService


def build_container(
    *,
    db_config: dict,
    redis_url: Optional[str] = None,
    statistics_timings: Optional[dict] = None,
) -> Container:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection.get_instance(config)

    persons_repo = MySQLPersonDirectory(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    rules_repo = MySQLCheckoutRuleRepository(conn)
    ledger_repo = MySQLLedgerRepository(conn)
    statistics_cache = cache_from_url(redis_url)

    attendance_service = AttendanceService(
        attendance_repo,
        persons_repo,
        ledger=ledger_repo,
        policy_factory=CheckoutPolicyFactory(),
    )
    rule_service = CheckoutRuleService(rules_repo, persons_repo, ledger=ledger_repo)
    preview_service = DeductionPreviewService(persons_repo, rules_repo)
    ledger_service = CheckoutLedgerService(ledger_repo, attendance_repo, rules_repo)
    statistics_service = DeductionStatisticsService(ledger_repo, statistics_cache, **(statistics_timings or {}))

    return Container(
        conn=conn,
        persons_repo=persons_repo,
        attendance_repo=attendance_repo,
        rules_repo=rules_repo,
        ledger_repo=ledger_repo,
        statistics_cache=statistics_cache,
        attendance_service=attendance_service,
        rule_service=rule_service,
        preview_service=preview_service,
        ledger_service=ledger_service,
        statistics_service=statistics_service,
    )
