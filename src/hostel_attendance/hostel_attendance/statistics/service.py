from __future__ import annotations

import logging
import time
from datetime import date
from typing import Callable, Optional

from ..common.datetime_utils import month_start, now_local
from ..common.validators import require_date_range
from ..core.constants import (
    STATISTICS_CACHE_KEY,
    STATISTICS_CACHE_TTL_SECONDS,
    STATISTICS_LOCK_SECONDS,
    STATISTICS_MAX_WAIT_MS,
    STATISTICS_POLL_INTERVAL_MS,
)
from ..core.enums import PersonCategory
from ..ledger.repository import LedgerRepository
from .aggregation import build_statistics
from .cache import StatisticsCache

logger = logging.getLogger(__name__)


class DeductionStatisticsService:
    """Deduction statistics over the ledger.

    current_statistics() coalesces concurrent recomputation: one caller takes
    the lock and fills the cache, the others poll for its result and, if it
    does not show up within the wait budget, compute on their own without
    touching the lock or the cache.
    """

    def __init__(
        self,
        ledger: LedgerRepository,
        cache: StatisticsCache,
        *,
        cache_ttl_seconds: int = STATISTICS_CACHE_TTL_SECONDS,
        lock_seconds: int = STATISTICS_LOCK_SECONDS,
        poll_interval_ms: int = STATISTICS_POLL_INTERVAL_MS,
        max_wait_ms: int = STATISTICS_MAX_WAIT_MS,
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._ledger = ledger
        self._cache = cache
        self._ttl = cache_ttl_seconds
        self._lock_seconds = lock_seconds
        self._poll_interval = poll_interval_ms / 1000
        self._max_wait = max_wait_ms / 1000
        self._monotonic = monotonic
        self._sleep = sleep

    def statistics(
        self,
        category: PersonCategory,
        start_date: date,
        end_date: date,
        location_id: Optional[int] = None,
    ) -> dict:
        require_date_range(start_date, end_date)
        return self._compute(PersonCategory(category), start_date, end_date, location_id)

    def current_statistics(
        self,
        category: PersonCategory,
        *,
        force_refresh: bool = False,
        today: Optional[date] = None,
    ) -> dict:
        """Statistics from the first of the month through today, served via the cache."""
        category = PersonCategory(category)
        today = today or now_local().date()
        start = month_start(today)

        key = f"{STATISTICS_CACHE_KEY}:{category.value}:{start.isoformat()}:{today.isoformat()}"
        lock_key = key + ":lock"

        if not force_refresh:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Statistics cache hit %s", key)
                return cached

        token = self._cache.try_acquire_lock(lock_key, self._lock_seconds)
        if token:
            try:
                logger.info("Statistics cache miss %s; recomputing", key)
                value = self._compute(category, start, today, None)
                self._cache.put(key, value, self._ttl)
                return value
            finally:
                self._cache.release_lock(lock_key, token)

        deadline = self._monotonic() + self._max_wait
        while self._monotonic() < deadline:
            self._sleep(self._poll_interval)
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Statistics filled by another worker %s", key)
                return cached

        logger.warning("Statistics lock busy for %.1fs; computing without cache", self._max_wait)
        return self._compute(category, start, today, None)

    def _compute(self, category: PersonCategory, start: date, end: date, location_id: Optional[int]) -> dict:
        rows = self._ledger.rows_in_range(category, start_date=start, end_date=end, location_id=location_id)
        return build_statistics(rows, start_date=start, end_date=end, location_id=location_id)
