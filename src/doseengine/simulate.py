# src/doseengine/simulate.py
import logging
from typing import Any, Iterable, Sequence, Tuple

import numpy as np

from .const import ROUND_DIGITS, TAIL_DAYS
from .dosing import normalize_doses
from .helpers import day_to_date
from .solvers import simulate_daily
from .types import ZEPBOUND, Compound, ConcentrationSample

_LOGGER = logging.getLogger(__name__)


def simulate(doses: Iterable[Any], compound: Compound = ZEPBOUND,
             tail_days: int = TAIL_DAYS) -> Tuple[ConcentrationSample, ...]:
    """
    Daily concentration curve for a dose list.

    `doses` may be DoseEvent objects or raw form rows; they go through
    normalize_doses() first, so malformed rows are skipped and an input with no
    valid dose yields an empty tuple. Pure: the same input always gives the same output.
    """
    events = normalize_doses(doses)
    if not events:
        _LOGGER.debug("No valid doses, nothing to simulate")
        return ()

    days, contributions = simulate_daily(events, compound, tail_days=tail_days)
    # total from the unrounded parts, then every figure rounded on its own
    totals = contributions.sum(axis=1)

    return tuple(
        ConcentrationSample(
            date=day_to_date(day),
            total_concentration=round(float(total), ROUND_DIGITS),
            per_dose_contribution=tuple(round(v, ROUND_DIGITS) for v in row.tolist()),
        )
        for day, total, row in zip(days, totals, contributions)
    )


def to_chart_rows(samples: Sequence[ConcentrationSample]) -> list[dict]:
    """
    Flatten samples into chart/table records:
      {"date": "2024-01-01", "concentration": 0.0, "dose1": 0.0, "dose2": 0.0, ...}
    """
    rows = []
    for s in samples:
        row = {"date": s.date.isoformat(), "concentration": s.total_concentration}
        for i, value in enumerate(s.per_dose_contribution):
            row[f"dose{i + 1}"] = value
        rows.append(row)
    return rows


def stacked_series(samples: Sequence[ConcentrationSample]) -> np.ndarray:
    """
    Running sum of per-dose contributions, shape (n_doses, n_days).
    Row i is the upper edge of dose i's band in a stacked area chart.
    """
    if not samples:
        return np.empty((0, 0), dtype=float)
    per_dose = np.array([s.per_dose_contribution for s in samples], dtype=float)
    return np.cumsum(per_dose, axis=1).T
