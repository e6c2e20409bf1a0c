"""Z-score deviation detection and the forward confidence band.

The z-score says how far the latest rate sits from its trailing mean, in
sample standard deviations. The fan chart projects a lognormal envelope
forward from spot using the current annualised volatility:

    expected_t = spot * exp(mu_daily * t)
    bound_t    = expected_t * exp(+/- z_c * sigma_daily * sqrt(t))

It is a closed-form risk envelope, not a forecast or a simulation.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np
import pandas as pd

from .normalize import as_series
from .stats import TRADING_DAYS, sample_mean, sample_stdev


# Two-sided critical values (approx)
Z50 = 0.674
Z75 = 1.15
Z95 = 1.96

CONFIDENCE_LEVELS = {50: Z50, 75: Z75, 95: Z95}

FAN_COLUMNS = [
    "date", "expected",
    "lower_50", "upper_50",
    "lower_75", "upper_75",
    "lower_95", "upper_95",
]


def _window(series, window: int) -> pd.Series:
    s = as_series(series)
    if window <= 0:
        return s.iloc[:0]
    return s.iloc[-window:]


def z_score(series, window: int = 90) -> Optional[float]:
    """(latest - mean) / stdev over up to the last ``window`` prices."""
    w = _window(series, window)
    if len(w) < 2:
        return None
    values = w.to_numpy(dtype=float)
    if np.ptp(values) == 0:
        return None
    sd = sample_stdev(values)
    if not sd:
        return None
    return float((values[-1] - sample_mean(values)) / sd)


def deviation_band(series, window: int = 90) -> pd.DataFrame:
    """Trailing window with its mean and 2/3-sigma band widths."""
    w = _window(series, window)
    if w.empty:
        return pd.DataFrame(columns=["date", "rate", "mean", "band2", "band3"])

    values = w.to_numpy(dtype=float)
    mu = sample_mean(values)
    sd = sample_stdev(values) or 0.0

    return pd.DataFrame(
        {
            "date": [ts.date().isoformat() for ts in w.index],
            "rate": values,
            "mean": mu,
            "band2": 2.0 * sd,
            "band3": 3.0 * sd,
        }
    )


def build_fan_chart(
    spot: float,
    start,
    annual_vol: Optional[float],
    mu_daily: float = 0.0,
    horizon: int = 30,
    trading_days: int = TRADING_DAYS,
) -> pd.DataFrame:
    """Volatility-driven lognormal envelope for ``t = 1..horizon`` days.

    ``annual_vol`` is a decimal (0.12 = 12%). Returns an empty frame when
    spot or volatility is missing, non-finite or non-positive.
    """
    if spot is None or annual_vol is None:
        return pd.DataFrame(columns=FAN_COLUMNS)
    spot = float(spot)
    annual_vol = float(annual_vol)
    if not math.isfinite(spot) or spot <= 0:
        return pd.DataFrame(columns=FAN_COLUMNS)
    if not math.isfinite(annual_vol) or annual_vol <= 0 or horizon <= 0:
        return pd.DataFrame(columns=FAN_COLUMNS)

    sigma_daily = annual_vol / math.sqrt(trading_days)
    start_day = pd.Timestamp(start).normalize()

    t = np.arange(1, horizon + 1, dtype=float)
    expected = spot * np.exp(mu_daily * t)
    spread = sigma_daily * np.sqrt(t)

    out = pd.DataFrame(
        {
            "date": [(start_day + pd.Timedelta(days=int(d))).date().isoformat() for d in t],
            "expected": expected,
        }
    )
    for level, z in CONFIDENCE_LEVELS.items():
        out[f"lower_{level}"] = expected * np.exp(-z * spread)
        out[f"upper_{level}"] = expected * np.exp(+z * spread)
    return out[FAN_COLUMNS]
