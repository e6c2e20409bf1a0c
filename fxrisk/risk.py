"""Risk analytics engine for a single FX rate series.

Implements:
- Lenient "up to N returns" volatility (metrics cards)
- Strict full-window volatility (regime / alert path)
- Maximum drawdown
- Worst / best single-day move
- Period min / max

All calculations are performed in pandas/numpy for transparency.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .normalize import as_series
from .stats import TRADING_DAYS, annualize, log_returns, sample_stdev, simple_returns, trailing


MIN_RETURNS_FOR_VOL = 10


@dataclass
class RiskMetrics:
    points: int
    returns_count: int = 0

    # Annualised volatility (decimal: 0.12 = 12%)
    vol_30_ann: Optional[float] = None
    vol_90_ann: Optional[float] = None

    # Max drawdown (decimal, <= 0)
    max_drawdown: Optional[float] = None

    # Worst / best single-day simple return (decimal)
    worst_daily_move: Optional[float] = None
    best_daily_move: Optional[float] = None

    period_min: Optional[float] = None
    period_max: Optional[float] = None
    period_min_date: Optional[pd.Timestamp] = None
    period_max_date: Optional[pd.Timestamp] = None

    latest_rate: Optional[float] = None
    latest_date: Optional[pd.Timestamp] = None

    def to_dict(self) -> dict:
        out = asdict(self)
        for k in ("period_min_date", "period_max_date", "latest_date"):
            if out[k] is not None:
                out[k] = out[k].date().isoformat()
        return out


def vol_up_to(
    returns: Iterable[float],
    max_returns: int,
    min_returns: int = MIN_RETURNS_FOR_VOL,
    trading_days: int = TRADING_DAYS,
) -> Optional[float]:
    """Annualised vol over up to the last ``max_returns`` returns.

    Uses whatever history exists (not exactly ``max_returns``) as long as
    there are at least ``min_returns`` returns overall.
    """
    rets = np.asarray(list(returns), dtype=float)
    if rets.size < min_returns:
        return None
    sigma = sample_stdev(trailing(rets, max_returns))
    if sigma is None:
        return None
    return annualize(sigma, trading_days)


def rolling_vol_strict(
    rates: Iterable[float],
    window: int,
    trading_days: int = TRADING_DAYS,
) -> Optional[float]:
    """Annualised vol over exactly the last ``window + 1`` prices.

    No partial windows: returns None unless ``window + 1`` prices exist and at
    least ``max(10, window - 2)`` valid log returns survive.
    """
    # TODO: fold vol_up_to and rolling_vol_strict into one estimator once the
    # metrics cards can tolerate the strict window's extra None results.
    arr = np.asarray(list(rates), dtype=float)
    if window <= 0 or arr.size < window + 1:
        return None
    rets = log_returns(arr[-(window + 1):])
    if rets.size < max(MIN_RETURNS_FOR_VOL, window - 2):
        return None
    sigma = sample_stdev(rets)
    if sigma is None:
        return None
    return annualize(sigma, trading_days)


def max_drawdown(rates: Iterable[float]) -> Optional[float]:
    """Most negative (price - running peak) / peak; 0.0 if never below a peak."""
    s = pd.Series(list(rates), dtype=float)
    s = s[np.isfinite(s)]
    if len(s) < 2:
        return None
    peak = s.cummax()
    dd = (s - peak) / peak.where(peak != 0)
    worst = float(dd.fillna(0.0).min())
    if not math.isfinite(worst):
        return None
    return min(worst, 0.0)


def compute_risk_metrics(series, trading_days: int = TRADING_DAYS) -> RiskMetrics:
    """Point-in-time risk metrics for a rate series (recomputed every call)."""
    s = as_series(series)
    n = len(s)
    if n < 2:
        return RiskMetrics(points=n)

    rates = s.to_numpy(dtype=float)
    simple = simple_returns(rates)
    logr = log_returns(rates)

    return RiskMetrics(
        points=n,
        returns_count=int(simple.size),
        vol_30_ann=vol_up_to(logr, 30, trading_days=trading_days),
        vol_90_ann=vol_up_to(logr, 90, trading_days=trading_days),
        max_drawdown=max_drawdown(rates),
        worst_daily_move=float(simple.min()) if simple.size else None,
        best_daily_move=float(simple.max()) if simple.size else None,
        period_min=float(s.min()),
        period_max=float(s.max()),
        period_min_date=s.idxmin(),
        period_max_date=s.idxmax(),
        latest_rate=float(rates[-1]),
        latest_date=s.index[-1],
    )
