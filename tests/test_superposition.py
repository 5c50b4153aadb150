import datetime as dt

import numpy as np
import pytest

from doseengine.dosing import fixed_every_n_days
from doseengine.simulate import simulate, stacked_series, to_chart_rows
from doseengine.solvers import simulate_daily
from doseengine.types import ZEPBOUND, DoseEvent


def test_two_weekly_doses_scenario():
    """
    5 mg on 2024-01-01 and 2024-01-08:
    36 daily samples from 2024-01-01 to 2024-02-05, peak of 4.00 on day 2,
    and the second peak adds 4.00 on top of what the first dose still leaves.
    """
    samples = simulate([("2024-01-01", "5"), ("2024-01-08", "5")])

    assert len(samples) == 7 + 28 + 1
    assert samples[0].date == dt.date(2024, 1, 1)
    assert samples[-1].date == dt.date(2024, 2, 5)

    by_date = {s.date: s for s in samples}
    assert by_date[dt.date(2024, 1, 2)].total_concentration == pytest.approx(4.00)

    jan9 = by_date[dt.date(2024, 1, 9)]
    first_dose_left = 5 * 0.8 * 0.5 ** (7 / 5)
    assert jan9.per_dose_contribution[1] == pytest.approx(4.00)
    assert jan9.total_concentration == pytest.approx(first_dose_left + 4.00, abs=0.01)


def test_sample_count_and_contiguous_dates():
    doses = fixed_every_n_days(2.5, "2024-02-26", count=4)
    samples = simulate(doses)

    span = (doses[-1].date - doses[0].date).days
    assert len(samples) == span + 28 + 1
    gaps = {(b.date - a.date).days for a, b in zip(samples, samples[1:])}
    assert gaps == {1}


def test_dates_do_not_drift_across_dst_change():
    # US and EU daylight-saving switches both fall inside this window
    samples = simulate([("2024-03-05", 5), ("2024-03-28", 5)])
    expected = [dt.date(2024, 3, 5) + dt.timedelta(days=k) for k in range(len(samples))]
    assert [s.date for s in samples] == expected


def test_total_equals_sum_of_contributions():
    samples = simulate([("2024-01-01", 2.5), ("2024-01-04", 3.3), ("2024-01-04", 7.1), ("2024-01-20", 15)])
    for s in samples:
        assert s.total_concentration >= 0
        assert abs(s.total_concentration - sum(s.per_dose_contribution)) <= 0.01 * len(s.per_dose_contribution)


def test_contribution_is_zero_before_each_dose():
    doses = [DoseEvent(dt.date(2024, 1, 1), 5.0), DoseEvent(dt.date(2024, 1, 15), 10.0)]
    for s in simulate(doses):
        for dose, value in zip(doses, s.per_dose_contribution):
            if s.date < dose.date:
                assert value == 0


def test_same_day_doses_keep_input_order():
    samples = simulate([("2024-01-02", 10), ("2024-01-01", 5), ("2024-01-02", 2)])
    peak = {s.date: s for s in samples}[dt.date(2024, 1, 3)]
    # sorted order: 2024-01-01 (5 mg), 2024-01-02 (10 mg), 2024-01-02 (2 mg)
    assert peak.per_dose_contribution[1] == 8.0
    assert peak.per_dose_contribution[2] == 1.6


def test_no_cap_on_overlapping_doses():
    samples = simulate([("2024-01-01", 100)] * 5)
    assert max(s.total_concentration for s in samples) == pytest.approx(400.0)


def test_simulate_is_repeatable():
    doses = [("2024-06-01", "2.5"), ("2024-06-08", "5"), ("", "5")]
    assert simulate(doses) == simulate(doses)


def test_empty_inputs_give_no_samples():
    assert simulate([]) == ()
    assert simulate([{"date": "", "amount": ""}, {"date": "  ", "amount": "5"}]) == ()
    days, contributions = simulate_daily((), ZEPBOUND)
    assert days.size == 0 and contributions.size == 0


def test_chart_rows_and_stacked_series():
    samples = simulate([("2024-01-01", 5), ("2024-01-03", 5)])
    rows = to_chart_rows(samples)
    assert rows[0] == {"date": "2024-01-01", "concentration": 0.0, "dose1": 0.0, "dose2": 0.0}
    assert set(rows[5]) == {"date", "concentration", "dose1", "dose2"}

    stacked = stacked_series(samples)
    assert stacked.shape == (2, len(samples))
    top = np.array([sum(s.per_dose_contribution) for s in samples])
    assert np.allclose(stacked[-1], top)
    assert np.all(stacked[1] >= stacked[0])


def test_solver_rejects_tail_past_calendar_end():
    doses = [DoseEvent(dt.date(9999, 12, 1), 5.0)]
    with pytest.raises(ValueError):
        simulate_daily(doses, ZEPBOUND, tail_days=60)
    days, _ = simulate_daily(doses, ZEPBOUND, tail_days=30)
    assert days[-1] == np.datetime64("9999-12-31")
