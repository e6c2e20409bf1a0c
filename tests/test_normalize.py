import math

import pandas as pd

from fxrisk.normalize import (
    as_series,
    count_dated,
    normalize_observations,
    parse_rate,
    parse_timestamp,
    to_observations,
)


def test_output_is_sorted_by_timestamp():
    records = [
        {"date": "2025-01-03", "rate": 58.3},
        {"date": "2025-01-01", "rate": 58.1},
        {"date": "2025-01-02", "rate": "58.2"},
    ]
    s = normalize_observations(records)
    assert list(s.values) == [58.1, 58.2, 58.3]
    assert s.index.is_monotonic_increasing
    assert str(s.index.tz) == "UTC"


def test_bad_rows_are_dropped_silently():
    records = [
        {"date": "2025-01-01", "rate": "₱58,123.5"},
        {"date": "not a date", "rate": 58.0},
        {"date": "2025-01-02", "rate": "n/a"},
        {"date": "2025-01-03", "rate": float("nan")},
        {"date": "2025-01-04", "rate": float("inf")},
        {"date": "2025-01-05", "rate": 0},
        {"date": "2025-01-06", "rate": -1.5},
        {"date": None, "rate": 58.0},
        {"rate": 58.0},
        {"date": "2025-01-07", "rate": 58.4},
    ]
    s = normalize_observations(records)
    assert len(s) == 2
    assert s.iloc[0] == 58123.5
    assert s.iloc[1] == 58.4


def test_accepts_pairs_and_dataframes():
    pairs = [("2025-01-02", 58.2), ("2025-01-01", "58.1")]
    df = pd.DataFrame({"date": ["2025-01-02", "2025-01-01"], "rate": [58.2, 58.1]})

    a = normalize_observations(pairs)
    b = normalize_observations(df)
    assert list(a.values) == [58.1, 58.2]
    assert list(b.values) == [58.1, 58.2]


def test_duplicate_timestamps_are_kept_in_input_order():
    records = [
        {"date": "2025-01-02", "rate": 1.0},
        {"date": "2025-01-01", "rate": 2.0},
        {"date": "2025-01-02", "rate": 3.0},
    ]
    s = normalize_observations(records)
    assert list(s.values) == [2.0, 1.0, 3.0]


def test_empty_input_gives_empty_series():
    assert normalize_observations([]).empty
    assert normalize_observations(None).empty


def test_unordered_random_input_is_monotonic():
    import numpy as np

    rng = np.random.default_rng(0)
    days = pd.date_range("2024-01-01", periods=100, freq="D")
    order = rng.permutation(len(days))
    records = [{"date": days[i].isoformat(), "rate": 50 + rng.random()} for i in order]
    s = normalize_observations(records)
    assert s.index.is_monotonic_increasing
    assert len(s) == 100


def test_field_parsers():
    assert parse_rate(" 58.75 ") == 58.75
    assert parse_rate(True) is None
    assert parse_rate("") is None
    assert parse_timestamp("garbage") is None
    ts = parse_timestamp("2025-01-01T08:00:00+08:00")
    assert ts == pd.Timestamp("2025-01-01T00:00:00Z")


def test_to_observations_round_trips_values():
    s = normalize_observations([("2025-01-01", 58.0), ("2025-01-02", 58.5)])
    obs = to_observations(s)
    assert [o.rate for o in obs] == [58.0, 58.5]
    assert all(math.isfinite(o.rate) for o in obs)


def test_non_scalar_rates_are_dropped():
    records = [
        {"date": "2025-01-01", "rate": {"v": 1}},
        {"date": "2025-01-02", "rate": [58.0]},
        {"date": "2025-01-03", "rate": (58.0,)},
        {"date": "2025-01-04", "rate": 58.0},
    ]
    s = normalize_observations(records)
    assert list(s.values) == [58.0]
    assert parse_rate({"v": 1}) is None
    assert parse_rate([58.0]) is None


def test_bare_numbers_are_not_dates():
    assert parse_timestamp(20250101) is None
    assert parse_timestamp(58.0) is None
    s = normalize_observations([(20250101, 58.0), ("2025-01-02", 58.1)])
    assert len(s) == 1
    assert s.index[0] == pd.Timestamp("2025-01-02", tz="UTC")


def test_dated_series_drops_missing_timestamps():
    idx = pd.DatetimeIndex(["2025-01-01", None, "2025-01-03"], tz="UTC")
    s = as_series(pd.Series([58.0, 58.1, 58.2], index=idx))
    assert list(s.values) == [58.0, 58.2]
    assert not s.index.hasnans
    assert s.index[-1] == pd.Timestamp("2025-01-03", tz="UTC")


def test_dated_series_parses_rate_strings_like_records():
    idx = pd.DatetimeIndex(["2025-01-01", "2025-01-02", "2025-01-03"])
    s = as_series(pd.Series(["₱58,123.5", "58.1", "n/a"], index=idx))
    assert list(s.values) == [58123.5, 58.1]
    assert str(s.index.tz) == "UTC"
    assert s.name == "rate"


def test_count_dated_ignores_rate_quality():
    records = [
        {"date": "2025-01-01", "rate": "n/a"},
        {"date": "garbage", "rate": 58.0},
        {"date": "2025-01-02", "rate": 58.0},
    ]
    assert count_dated(records) == 2
    assert count_dated(None) == 0
