# src/doseengine/aggregate.py
from typing import Sequence, Tuple

import numpy as np

from .const import ROUND_DIGITS, WEEK_LENGTH_DAYS
from .types import ConcentrationSample, WeeklyAverage


def weekly_averages(samples: Sequence[ConcentrationSample],
                    week_length: int = WEEK_LENGTH_DAYS) -> Tuple[WeeklyAverage, ...]:
    """
    Average daily totals over consecutive blocks of `week_length` samples.

    Blocks are counted from the first simulated day, not aligned to weekdays.
    A shorter final block is averaged over the days it actually has.
    """
    if not (isinstance(week_length, int) and week_length > 0):
        raise ValueError(f"week_length must be a positive integer (got {week_length}).")

    totals = np.array([s.total_concentration for s in samples], dtype=float)
    weeks = []
    for week_index, start in enumerate(range(0, len(totals), week_length), start=1):
        chunk = totals[start:start + week_length]
        weeks.append(WeeklyAverage(
            week_index=week_index,
            avg_concentration=round(float(np.mean(chunk)), ROUND_DIGITS),
        ))
    return tuple(weeks)
