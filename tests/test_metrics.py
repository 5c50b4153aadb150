import datetime as dt
import math

import numpy as np

from doseengine.metrics import (
    as_arrays, auc_trapz, cavg, cmax, cmin, fluctuation_index, peak_to_trough_ratio, summarize, tmax,
)
from doseengine.dosing import fixed_every_n_days
from doseengine.simulate import simulate


def test_single_dose_metrics():
    samples = simulate([("2024-01-01", 5)])
    t, C = as_arrays(samples)

    assert cmax(C) == 4.0
    assert tmax(t, C) == 1.0
    assert cmin(C) == 0.0
    assert 0.0 < cavg(C) < cmax(C)
    # ramp triangle (2 mg*day) plus most of the exponential tail (4 * 5 / ln2)
    assert 20.0 < auc_trapz(t, C) < 2.0 + 4.0 * 5 / math.log(2)
    assert math.isinf(peak_to_trough_ratio(t, C))


def test_weekly_regimen_fluctuation_over_last_interval():
    samples = simulate(fixed_every_n_days(5, "2024-01-01", count=8))
    t, C = as_arrays(samples)
    ptr = peak_to_trough_ratio(t, C, interval_days=7)
    fi = fluctuation_index(t, C, interval_days=7)
    assert np.isfinite(ptr) and ptr > 1.0
    assert np.isfinite(fi) and fi > 0.0


def test_summarize():
    samples = simulate([("2024-01-01", 5), ("2024-01-08", 5)])
    summary = summarize(samples)
    assert summary["tmax"] == dt.date(2024, 1, 9)
    assert summary["cmax"] == max(s.total_concentration for s in samples)
    assert set(summary) == {"cmax", "tmax", "cmin", "cavg", "auc", "ptr", "fluctuation"}
    assert math.isinf(summary["ptr"]) or summary["ptr"] > 1.0
    assert summarize([]) == {}
