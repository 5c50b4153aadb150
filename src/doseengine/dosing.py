# src/doseengine/dosing.py
from __future__ import annotations

import datetime as dt
import logging
import math
import numbers
import re
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Sequence, Tuple

from .const import MAX_DOSE_ENTRIES, TAIL_DAYS, WEEK_LENGTH_DAYS
from .helpers import as_calendar_day
from .types import DoseEntry, DoseEvent

_LOGGER = logging.getLogger(__name__)

ENTRY_FIELDS = ("date", "amount")

_ISO_DAY = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# last dose date whose simulation window still fits in datetime.date
LATEST_DOSE_DATE = dt.date.max - dt.timedelta(days=TAIL_DAYS)


def normalize_doses(entries: Iterable[Any]) -> Tuple[DoseEvent, ...]:
    """
    Turn raw form rows into the time-ordered doses a simulation runs on.

    Accepts DoseEntry objects, {"date", "amount"} mappings, (date, amount) pairs
    or DoseEvent objects. A row is kept only if its date is a YYYY-MM-DD string or a
    date, no later than LATEST_DOSE_DATE, and its amount is a finite number > 0.
    Anything else is dropped without raising. The result is
    sorted by date, and rows sharing a date keep their input order.

    An empty result means "nothing to simulate", not an error.
    """
    doses: list[DoseEvent] = []
    for position, raw in enumerate(entries):
        date_value, amount_value = _unpack_entry(raw)
        day = _parse_date(date_value)
        amount = _parse_amount(amount_value)
        if day is None or day > LATEST_DOSE_DATE or amount is None:
            _LOGGER.debug("Dropping dose entry #%d (%r, %r)", position + 1, date_value, amount_value)
            continue
        doses.append(DoseEvent(date=day, amount_mg=amount))
    # sorted() is stable: same-day doses stay in entry order
    return tuple(sorted(doses, key=lambda d: d.date))


def from_explicit_schedule(entries: Sequence[Tuple[Any, float]]) -> Tuple[DoseEvent, ...]:
    """
    Build doses from manual (date, amount_mg) pairs, rejecting bad values.
    Example: entries=[("2024-01-01", 2.5), ("2024-01-08", 2.5), ("2024-01-15", 5)]

    Unlike normalize_doses() this is meant for programmatic input, so a bad pair
    raises ValueError instead of being skipped.
    """
    doses: list[DoseEvent] = []
    for date_value, amount_mg in entries:
        day = _parse_date(date_value)
        if day is None:
            raise ValueError(f"date must be an ISO calendar date (got {date_value!r}).")
        _validate_positive("amount_mg", amount_mg)
        doses.append(DoseEvent(date=day, amount_mg=float(amount_mg)))
    doses.sort(key=lambda d: d.date)
    return tuple(doses)


def fixed_every_n_days(amount_mg: float, first: Any, count: int,
                       every_days: int = WEEK_LENGTH_DAYS) -> Tuple[DoseEvent, ...]:
    """
    Make a regular schedule like: 2.5 mg once a week, 4 injections.

    amount_mg  : size of each dose, mg
    first      : date of the first dose
    count      : number of doses
    every_days : spacing between doses in whole days (weekly by default)
    """
    _validate_positive("amount_mg", amount_mg)
    _validate_positive_int("count", count)
    _validate_positive_int("every_days", every_days)
    start = _parse_date(first)
    if start is None:
        raise ValueError(f"first must be an ISO calendar date (got {first!r}).")

    return tuple(
        DoseEvent(date=start + dt.timedelta(days=k * every_days), amount_mg=float(amount_mg))
        for k in range(count)
    )


# --------------------------
# Form list editing
# --------------------------
def blank_entry() -> DoseEntry:
    return DoseEntry(date="", amount="")


def add_entry(entries: Sequence[DoseEntry], max_entries: int = MAX_DOSE_ENTRIES) -> list[DoseEntry]:
    """Append a blank row; at the form limit the list comes back unchanged."""
    if len(entries) >= max_entries:
        return list(entries)
    return [*entries, blank_entry()]


def remove_entry(entries: Sequence[DoseEntry], index: int) -> list[DoseEntry]:
    """Drop row `index`. The form always keeps at least one (blank) row."""
    _validate_index(entries, index)
    remaining = [e for i, e in enumerate(entries) if i != index]
    return remaining or [blank_entry()]


def update_entry(entries: Sequence[DoseEntry], index: int, field: str, value: Any) -> list[DoseEntry]:
    """Replace one field of row `index` with whatever the user typed."""
    _validate_index(entries, index)
    if field not in ENTRY_FIELDS:
        raise ValueError(f"field must be one of {ENTRY_FIELDS} (got {field!r}).")
    updated = list(entries)
    old = updated[index]
    updated[index] = DoseEntry(
        date=value if field == "date" else old.date,
        amount=value if field == "amount" else old.amount,
    )
    return updated


def entries_from_records(records: Iterable[Any]) -> list[DoseEntry]:
    """Coerce stored or user-supplied rows into DoseEntry objects, keeping blanks."""
    out: list[DoseEntry] = []
    for raw in records:
        date_value, amount_value = _unpack_entry(raw)
        out.append(DoseEntry(
            date="" if date_value is None else date_value,
            amount="" if amount_value is None else amount_value,
        ))
    return out


# --------------------------
# Raw value parsing
# --------------------------
def _unpack_entry(raw: Any) -> Tuple[Any, Any]:
    if isinstance(raw, DoseEntry):
        return raw.date, raw.amount
    if isinstance(raw, DoseEvent):
        return raw.date, raw.amount_mg
    if isinstance(raw, Mapping):
        return raw.get("date"), raw.get("amount")
    if isinstance(raw, (tuple, list)) and len(raw) == 2:
        return raw[0], raw[1]
    return None, None


def _parse_date(value: Any) -> Optional[dt.date]:
    if isinstance(value, str):
        text = value.strip()
        if not _ISO_DAY.fullmatch(text):
            return None
        try:
            return dt.date.fromisoformat(text)
        except ValueError:
            return None
    return as_calendar_day(value)


def _parse_amount(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


# --------------------------
# Small input validators
# --------------------------
def _validate_positive(name: str, x: float) -> None:
    if isinstance(x, bool) or not isinstance(x, numbers.Real) or not (x > 0) or not math.isfinite(x):
        raise ValueError(f"{name} must be a finite number > 0 (got {x!r}).")

def _validate_positive_int(name: str, x: int) -> None:
    if not (isinstance(x, int) and x > 0):
        raise ValueError(f"{name} must be a positive integer (got {x}).")

def _validate_index(entries: Sequence[Any], index: int) -> None:
    if not (0 <= index < len(entries)):
        raise IndexError(f"entry index {index} out of range for {len(entries)} entries.")
