from __future__ import annotations

from ...core.constants import DAYS_PER_MONTH, HOURS_PER_DAY
from .base import RateModel


class StandardRateModel(RateModel):
    """Fixed convention: a month is 30 days, a day is 24 hours. Not calendar aware."""

    def daily_rate(self, base_amount: float) -> float:
        return float(base_amount) / DAYS_PER_MONTH

    def hourly_rate(self, base_amount: float) -> float:
        return self.daily_rate(base_amount) / HOURS_PER_DAY
