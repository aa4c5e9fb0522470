"""
burrito.engine.periods — Report period buckets
===============================================

Maps a timestamp to the key of the daily/weekly/monthly/yearly bucket it
falls into.  Two timestamps are in the same report period iff their keys
are equal.

The weekly key is NOT an ISO week.  It anchors on the Sunday on/before
the date and numbers weeks by that Sunday's day-of-month, so week
numbers restart every month and a week that starts on the 29th-31st is
"W5".
"""

from __future__ import annotations

import enum
import math
from datetime import date, datetime, timedelta

__all__ = ["Period", "parse_period", "period_key"]


class Period(enum.StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


def parse_period(value: str | None) -> Period | None:
    """Case-insensitive lookup; ``None`` for anything unknown."""
    if not value:
        return None
    try:
        return Period(value.strip().lower())
    except ValueError:
        return None


def _week_start(day: date) -> date:
    # date.weekday(): Monday=0 … Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def period_key(when: datetime | date, period: Period) -> str:
    if period is Period.DAILY:
        return f"{when.year}-{when.month}-{when.day}"
    if period is Period.WEEKLY:
        sunday = _week_start(when)
        return f"{sunday.year}-W{math.ceil(sunday.day / 7)}"
    if period is Period.MONTHLY:
        return f"{when.year}-{when.month}"
    return f"{when.year}"
