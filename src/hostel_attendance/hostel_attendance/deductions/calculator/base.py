from __future__ import annotations

from abc import ABC, abstractmethod

from ...common.money import round_money


class RateModel(ABC):
    """Turns a periodic base amount into daily/hourly rates (Strategy Pattern for deductions)."""

    @abstractmethod
    def daily_rate(self, base_amount: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def hourly_rate(self, base_amount: float) -> float:
        raise NotImplementedError

    def deduction_for_hours(self, base_amount: float, percentage: float, hours: float) -> float:
        return round_money(self.hourly_rate(base_amount) * hours * (percentage / 100))

    def deduction_for_days(self, base_amount: float, percentage: float, days: float) -> float:
        return round_money(self.daily_rate(base_amount) * days * (percentage / 100))
