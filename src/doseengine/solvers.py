# src/doseengine/solvers.py
import datetime as dt
import logging
from typing import Sequence

import numpy as np

from .const import TAIL_DAYS
from .helpers import DAY, date_to_day, day_grid
from .models.ramp_decay import ramp_then_decay
from .types import Compound, DoseEvent

_LOGGER = logging.getLogger(__name__)


def simulate_daily(doses: Sequence[DoseEvent], compound: Compound,
                   tail_days: int = TAIL_DAYS):
    """
    Superpose the ramp-then-decay profile of every dose on a daily grid.

    The grid runs from the first dose date to `tail_days` after the last one,
    both ends included. Doses must already be sorted by date (see normalize_doses);
    column i of the result belongs to doses[i].

    Returns:
      days          : datetime64[D] array, one entry per calendar day
      contributions : (n_days, n_doses) float array of unrounded per-dose levels (mg)
    """
    if not doses:
        return np.empty(0, dtype="datetime64[D]"), np.empty((0, 0), dtype=float)
    if tail_days < 0:
        raise ValueError(f"tail_days must be >= 0 (got {tail_days}).")

    first = doses[0].date
    if (dt.date.max - doses[-1].date).days < tail_days:
        raise ValueError(f"last dose {doses[-1].date} leaves no room for {tail_days} tail days.")
    last = doses[-1].date + dt.timedelta(days=int(tail_days))
    days = day_grid(first, last)

    dose_days = np.array([date_to_day(d.date) for d in doses], dtype="datetime64[D]")
    amounts = np.array([d.amount_mg for d in doses], dtype=float)

    # elapsed[k, i] = whole days between dose i and grid day k (negative before the dose)
    elapsed = ((days[:, None] - dose_days[None, :]) / DAY).astype(float)
    contributions = ramp_then_decay(elapsed, amounts[None, :], compound)

    _LOGGER.debug("Simulated %d doses over %d days (%s to %s)",
                  len(doses), len(days), first, last)
    return days, contributions
