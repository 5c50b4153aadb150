import datetime as dt
import math

import pytest

from doseengine.aggregate import weekly_averages
from doseengine.simulate import simulate
from doseengine.types import ConcentrationSample


def _flat_series(values, start=dt.date(2024, 1, 3)):
    return [
        ConcentrationSample(date=start + dt.timedelta(days=k), total_concentration=v, per_dose_contribution=(v,))
        for k, v in enumerate(values)
    ]


def test_week_count_and_short_final_week():
    samples = simulate([("2024-01-01", "5"), ("2024-01-08", "5")])
    weeks = weekly_averages(samples)

    assert len(weeks) == math.ceil(len(samples) / 7)
    assert [w.week_index for w in weeks] == list(range(1, len(weeks) + 1))

    tail = samples[(len(weeks) - 1) * 7:]
    assert len(tail) == len(samples) % 7
    expected = round(sum(s.total_concentration for s in tail) / len(tail), 2)
    assert weeks[-1].avg_concentration == expected


def test_chunks_follow_sample_position_not_weekday():
    # starts on a Wednesday; week 1 is still the first seven samples
    samples = _flat_series([1.0] * 7 + [3.0] * 7 + [5.0, 6.0])
    weeks = weekly_averages(samples)
    assert [w.avg_concentration for w in weeks] == [1.0, 3.0, 5.5]
    assert weeks[0].label == "Week 1"


def test_averages_are_rounded():
    weeks = weekly_averages(_flat_series([1.0, 1.0, 1.01]))
    assert weeks[0].avg_concentration == 1.0


def test_empty_series_gives_no_weeks():
    assert weekly_averages([]) == ()


def test_bad_week_length():
    with pytest.raises(ValueError):
        weekly_averages(_flat_series([1.0]), week_length=0)
