# src/doseengine/cli.py
import argparse
import csv
import logging
import sys
from typing import List, Optional, Sequence

from .aggregate import weekly_averages
from .const import BIOAVAILABILITY, HALF_LIFE_DAYS, PEAK_DELAY_DAYS, TAIL_DAYS
from .metrics import summarize
from .simulate import simulate, to_chart_rows
from .types import Compound, DoseEntry

_LOGGER = logging.getLogger(__name__)


def _dose_arg(text: str) -> DoseEntry:
    # "2024-01-01:5" -> DoseEntry("2024-01-01", "5"); validity is decided later
    date, _, amount = text.partition(":")
    return DoseEntry(date=date, amount=amount)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Daily plasma concentration from a dose list")
    parser.add_argument("--dose", type=_dose_arg, action="append", default=[],
                        metavar="DATE:MG", help="Dose as YYYY-MM-DD:amount_mg (repeatable)")
    parser.add_argument("--half-life", type=float, default=HALF_LIFE_DAYS, help="Elimination half-life (days)")
    parser.add_argument("--bioavailability", type=float, default=BIOAVAILABILITY, help="Bioavailable fraction")
    parser.add_argument("--peak-delay", type=float, default=PEAK_DELAY_DAYS, help="Time to peak (days)")
    parser.add_argument("--tail", type=int, default=TAIL_DAYS, help="Days simulated past the last dose")
    parser.add_argument("--weekly", action="store_true", help="Write weekly averages instead of daily rows")
    parser.add_argument("--csv", type=str, default=None, help="Output CSV path (default: stdout)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        compound = Compound(
            half_life_days=args.half_life,
            bioavailability=args.bioavailability,
            peak_delay_days=args.peak_delay,
        )
        samples = simulate(args.dose, compound, tail_days=args.tail)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.weekly:
        headers: List[str] = ["week", "avg_concentration"]
        rows = [[w.label, w.avg_concentration] for w in weekly_averages(samples)]
    else:
        n_doses = len(samples[0].per_dose_contribution) if samples else 0
        headers = ["date", "concentration"] + [f"dose{i + 1}" for i in range(n_doses)]
        rows = [[r[h] for h in headers] for r in to_chart_rows(samples)]

    if args.csv:
        with open(args.csv, "w", newline="") as f:
            _write_rows(f, headers, rows)
    else:
        _write_rows(sys.stdout, headers, rows)

    summary = summarize(samples)
    if summary:
        print(
            f"Cmax {summary['cmax']:.2f} mg on {summary['tmax'].isoformat()} | "
            f"Cavg {summary['cavg']:.2f} mg | AUC {summary['auc']:.1f} mg*day",
            file=sys.stderr,
        )
    else:
        _LOGGER.info("No valid doses given")
    return 0


def _write_rows(f, headers, rows) -> None:
    writer = csv.writer(f)
    writer.writerow(headers)
    writer.writerows(rows)


if __name__ == "__main__":
    raise SystemExit(run_cli())
