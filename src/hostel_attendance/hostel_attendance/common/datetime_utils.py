from __future__ import annotations

from datetime import date, datetime


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_key(day: date) -> str:
    return day.strftime("%Y-%m")
