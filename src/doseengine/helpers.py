# src/doseengine/helpers.py
from __future__ import annotations

import datetime as dt
from typing import Any, Optional

import numpy as np

# datetime64[D] counts whole days since the epoch: no clock, no timezone, no DST shifts.
DAY = np.timedelta64(1, "D")


def as_calendar_day(value: Any) -> Optional[dt.date]:
    """Return the calendar day of a date-like value, or None if it is not one."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            return None
        return day_to_date(value)
    return None


def date_to_day(day: dt.date) -> np.datetime64:
    return np.datetime64(day.isoformat(), "D")


def day_to_date(day: np.datetime64) -> dt.date:
    return day.astype("datetime64[D]").astype(dt.date)


def day_grid(first: dt.date, last: dt.date) -> np.ndarray:
    """Every calendar day from `first` to `last`, both included."""
    return np.arange(date_to_day(first), date_to_day(last) + DAY, DAY)
