"""doseengine: daily plasma concentration tracker for self-administered doses.

Public entry points:
  simulate(doses)          -> tuple of ConcentrationSample
  weekly_averages(samples) -> tuple of WeeklyAverage
"""

from .types import Compound, ConcentrationSample, DoseEntry, DoseEvent, WeeklyAverage, ZEPBOUND
from .dosing import normalize_doses
from .simulate import simulate, to_chart_rows
from .aggregate import weekly_averages

__all__ = [
    "Compound",
    "ConcentrationSample",
    "DoseEntry",
    "DoseEvent",
    "WeeklyAverage",
    "ZEPBOUND",
    "normalize_doses",
    "simulate",
    "to_chart_rows",
    "weekly_averages",
]

__version__ = "0.1.0"
