# src/doseengine/types.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Tuple

from .const import BIOAVAILABILITY, HALF_LIFE_DAYS, PEAK_DELAY_DAYS

# We keep *all* time in whole calendar DAYS. No clock time, no timezone.


@dataclass
class DoseEntry:
    """
    One row of the dose form, exactly as the user left it.

    date   : ISO "YYYY-MM-DD" text, a datetime.date, or blank
    amount : amount in mg as text or a number, or blank

    Entries may be half filled; normalize_doses() decides which ones count.
    """
    date: Any = ""
    amount: Any = ""

    def as_dict(self) -> dict[str, str]:
        date = self.date.isoformat() if isinstance(self.date, dt.date) else self.date
        return {
            "date": "" if date is None else str(date),
            "amount": "" if self.amount is None else str(self.amount),
        }


@dataclass(frozen=True)
class DoseEvent:
    """
    A single accepted administration.

    date      : calendar day the dose was taken
    amount_mg : dose size in milligrams (> 0)
    """
    date: dt.date
    amount_mg: float


@dataclass(frozen=True)
class Compound:
    """
    PK parameters of the ramp-then-decay model.

    half_life_days   : elimination half-life measured from the peak
    bioavailability  : fraction of the dose reaching circulation (0 < F <= 1)
    peak_delay_days  : administration-to-peak time; concentration rises linearly before it
    """
    half_life_days: float = HALF_LIFE_DAYS
    bioavailability: float = BIOAVAILABILITY
    peak_delay_days: float = PEAK_DELAY_DAYS
    name: str = "default"

    def __post_init__(self) -> None:
        if not (self.half_life_days > 0):
            raise ValueError(f"half_life_days must be > 0 (got {self.half_life_days}).")
        if not (0 < self.bioavailability <= 1):
            raise ValueError(f"bioavailability must be in (0, 1] (got {self.bioavailability}).")
        if not (self.peak_delay_days >= 0):
            raise ValueError(f"peak_delay_days must be >= 0 (got {self.peak_delay_days}).")


ZEPBOUND = Compound(name="tirzepatide")


@dataclass(frozen=True)
class ConcentrationSample:
    """
    Concentration on one simulated day.

    per_dose_contribution[i] belongs to the i-th dose of the date-sorted input.
    Every figure is rounded to 2 decimals; the total is rounded from the unrounded sum.
    """
    date: dt.date
    total_concentration: float
    per_dose_contribution: Tuple[float, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class WeeklyAverage:
    week_index: int
    avg_concentration: float

    @property
    def label(self) -> str:
        return f"Week {self.week_index}"
