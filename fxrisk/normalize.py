"""Series normalisation.

Turns loosely-typed upstream rows into the strict rate series every other
module works on:
- rate may be a number or a string such as "58.123" or "₱58,123.5"
- date may be an ISO string, a date/datetime or a pandas Timestamp
- unparseable, non-finite or non-positive rows are dropped, never raised

The result is a float ``pd.Series`` named "rate", indexed by an ascending UTC
``DatetimeIndex``.
"""

from __future__ import annotations

import logging
import math
import numbers
import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import pandas as pd


logger = logging.getLogger(__name__)

DATE_KEYS = ("date", "timestamp", "dateISO")
RATE_KEYS = ("rate", "value")

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


@dataclass(frozen=True)
class Observation:
    timestamp: pd.Timestamp
    rate: float


def empty_series() -> pd.Series:
    return pd.Series([], index=pd.DatetimeIndex([], tz="UTC"), dtype=float, name="rate")


def parse_rate(value: Any) -> float | None:
    """Parse a rate field into a positive finite float, or None."""
    if isinstance(value, bool) or value is None:
        return None
    if not pd.api.types.is_scalar(value):
        return None
    if isinstance(value, str):
        value = _NON_NUMERIC.sub("", value)
        if not value:
            return None
    num = pd.to_numeric(value, errors="coerce")
    try:
        num = float(num)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(num) or num <= 0:
        return None
    return num


def parse_timestamp(value: Any) -> pd.Timestamp | None:
    """Parse a date-like field into a UTC Timestamp, or None."""
    if value is None or isinstance(value, bool):
        return None
    # bare numbers would be read as epoch nanoseconds
    if isinstance(value, numbers.Number) or not pd.api.types.is_scalar(value):
        return None
    try:
        ts = pd.to_datetime(value, errors="coerce", utc=True)
    except (TypeError, ValueError, OverflowError):
        return None
    if not isinstance(ts, pd.Timestamp) or pd.isna(ts):
        return None
    return ts


def _pick(row: Mapping, keys: tuple[str, ...]) -> Any:
    for k in keys:
        if k in row:
            return row[k]
    return None


def _split_record(row: Any) -> tuple[Any, Any]:
    if isinstance(row, Mapping):
        return _pick(row, DATE_KEYS), _pick(row, RATE_KEYS)
    if isinstance(row, (tuple, list)) and len(row) == 2:
        return row[0], row[1]
    return None, None


def _iter_rows(records: Any) -> Iterable[Any]:
    if isinstance(records, pd.DataFrame):
        return records.to_dict(orient="records")
    if isinstance(records, pd.Series):
        return list(records.items())
    return records


def normalize_observations(records: Any) -> pd.Series:
    """Build a clean, time-ordered rate series from raw records.

    Accepts mappings (``{"date": ..., "rate": ...}``), ``(date, rate)``
    pairs, a DataFrame with date/rate columns or a Series indexed by date.
    """
    if records is None:
        return empty_series()

    obs: list[Observation] = []
    total = 0
    for row in _iter_rows(records):
        total += 1
        raw_date, raw_rate = _split_record(row)
        ts = parse_timestamp(raw_date)
        rate = parse_rate(raw_rate)
        if ts is None or rate is None:
            continue
        obs.append(Observation(timestamp=ts, rate=rate))

    dropped = total - len(obs)
    if dropped:
        logger.debug("Dropped %d of %d raw FX records (bad date or rate)", dropped, total)

    if not obs:
        return empty_series()

    series = pd.Series(
        [o.rate for o in obs],
        index=pd.DatetimeIndex([o.timestamp for o in obs]),
        dtype=float,
        name="rate",
    )
    # mergesort is stable, duplicates keep their input order
    return series.sort_index(kind="mergesort")


def as_series(data: Any) -> pd.Series:
    """Return ``data`` as a clean rate series, normalising raw input if needed."""
    if isinstance(data, pd.Series) and isinstance(data.index, pd.DatetimeIndex):
        rates = pd.Series([parse_rate(v) for v in data.to_numpy()], index=data.index, dtype=float)
        clean = rates[rates.notna() & ~data.index.isna()]
        if clean.index.tz is None:
            clean.index = clean.index.tz_localize("UTC")
        else:
            clean.index = clean.index.tz_convert("UTC")
        return clean.sort_index(kind="mergesort").rename("rate")
    return normalize_observations(data)


def to_observations(series: pd.Series) -> list[Observation]:
    return [Observation(timestamp=ts, rate=float(r)) for ts, r in series.items()]


def count_dated(data: Any) -> int:
    """Number of raw rows whose date parses, whatever their rate."""
    if data is None:
        return 0
    if isinstance(data, pd.Series) and isinstance(data.index, pd.DatetimeIndex):
        return int((~data.index.isna()).sum())
    return sum(1 for row in _iter_rows(data) if parse_timestamp(_split_record(row)[0]) is not None)
