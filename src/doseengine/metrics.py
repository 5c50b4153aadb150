# src/doseengine/metrics.py
import datetime as dt
from typing import Sequence, Tuple

import numpy as np
from scipy.integrate import trapezoid

from .const import ROUND_DIGITS, WEEK_LENGTH_DAYS
from .types import ConcentrationSample


def as_arrays(samples: Sequence[ConcentrationSample]) -> Tuple[np.ndarray, np.ndarray]:
    """Return t (days since the first sample) and C (daily totals, mg)."""
    C = np.array([s.total_concentration for s in samples], dtype=float)
    t = np.arange(len(C), dtype=float)
    return t, C

def cmax(C: np.ndarray) -> float:
    """Highest daily concentration (mg)."""
    return float(np.max(C))

def tmax(t: np.ndarray, C: np.ndarray) -> float:
    """Day offset of the highest concentration (first one on ties)."""
    return float(t[int(np.argmax(C))])

def cmin(C: np.ndarray) -> float:
    """Lowest daily concentration (mg)."""
    return float(np.min(C))

def cavg(C: np.ndarray) -> float:
    """Mean concentration over the simulated window."""
    return float(np.mean(C))

def auc_trapz(t: np.ndarray, C: np.ndarray) -> float:
    """Area under the daily curve via the trapezoidal rule (mg*day)."""
    return float(trapezoid(C, t))

def _last_interval_mask(t: np.ndarray, interval_days: float) -> np.ndarray:
    """
    Select the samples in the last full dosing interval.
    If the series is shorter than one interval, select everything.
    """
    if interval_days <= 0:
        return np.ones_like(t, dtype=bool)
    last_edge = (t[-1] // interval_days) * interval_days
    start = last_edge - interval_days
    if start < t[0]:
        return np.ones_like(t, dtype=bool)
    return (t >= start) & (t <= last_edge)

def peak_to_trough_ratio(t: np.ndarray, C: np.ndarray, interval_days: float | None = None) -> float:
    """
    Cmax / Cmin, over the last full dosing interval when interval_days is given.
    Infinite when the window touches zero.
    """
    Cw = C[_last_interval_mask(t, float(interval_days))] if interval_days else C
    low = float(np.min(Cw))
    if low <= 0:
        return float("inf")
    return float(np.max(Cw)) / low

def fluctuation_index(t: np.ndarray, C: np.ndarray, interval_days: float | None = None) -> float:
    """(Cmax - Cmin) / Cavg, windowed like peak_to_trough_ratio."""
    Cw = C[_last_interval_mask(t, float(interval_days))] if interval_days else C
    mean = float(np.mean(Cw))
    if mean == 0.0:
        return float("inf")
    return (float(np.max(Cw)) - float(np.min(Cw))) / mean

def summarize(samples: Sequence[ConcentrationSample],
              interval_days: float = WEEK_LENGTH_DAYS) -> dict:
    """
    Headline figures for a simulated curve; empty dict for no samples.

    Keys: cmax, tmax (date of the peak), cmin, cavg, auc, ptr, fluctuation.
    """
    if not samples:
        return {}
    t, C = as_arrays(samples)
    peak_date: dt.date = samples[int(tmax(t, C))].date
    return {
        "cmax": round(cmax(C), ROUND_DIGITS),
        "tmax": peak_date,
        "cmin": round(cmin(C), ROUND_DIGITS),
        "cavg": round(cavg(C), ROUND_DIGITS),
        "auc": round(auc_trapz(t, C), ROUND_DIGITS),
        "ptr": peak_to_trough_ratio(t, C, interval_days),
        "fluctuation": fluctuation_index(t, C, interval_days),
    }
