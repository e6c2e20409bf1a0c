"""Statistics helpers shared by the risk, regime and alert modules.

Every function here is total: undersized input gives ``0.0`` or ``None``
instead of raising, so callers can surface "not computable" distinctly from
a real zero.

Two return conventions live side by side on purpose:
- ``log_returns`` feeds every volatility estimate
- ``simple_returns`` feeds daily move / drawdown style reporting
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

import numpy as np


TRADING_DAYS = 252


def _as_array(xs: Iterable[float]) -> np.ndarray:
    return np.asarray(list(xs) if not isinstance(xs, np.ndarray) else xs, dtype=float)


def sample_mean(xs: Iterable[float]) -> float:
    arr = _as_array(xs)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def sample_stdev(xs: Iterable[float]) -> Optional[float]:
    """Sample standard deviation (ddof=1); None when fewer than 2 values."""
    arr = _as_array(xs)
    if arr.size < 2:
        return None
    var = float(arr.var(ddof=1))
    if not math.isfinite(var) or var < 0:
        return None
    return math.sqrt(var)


def log_returns(rates: Iterable[float]) -> np.ndarray:
    """ln(b/a) for adjacent pairs where both prices are positive."""
    arr = _as_array(rates)
    if arr.size < 2:
        return np.empty(0, dtype=float)
    prev, cur = arr[:-1], arr[1:]
    ok = (prev > 0) & (cur > 0) & np.isfinite(prev) & np.isfinite(cur)
    return np.log(cur[ok] / prev[ok])


def simple_returns(rates: Iterable[float]) -> np.ndarray:
    """b/a - 1 for adjacent pairs where the earlier price is non-zero."""
    arr = _as_array(rates)
    if arr.size < 2:
        return np.empty(0, dtype=float)
    prev, cur = arr[:-1], arr[1:]
    ok = (prev != 0) & np.isfinite(prev) & np.isfinite(cur)
    return cur[ok] / prev[ok] - 1.0


def annualize(daily_sigma: float, trading_days: int = TRADING_DAYS) -> float:
    return float(daily_sigma) * math.sqrt(trading_days)


def trailing(xs: Iterable[float], n: int) -> np.ndarray:
    """Up to the last ``n`` values (all of them when fewer exist)."""
    arr = _as_array(xs)
    if n <= 0:
        return arr[:0]
    return arr[-min(n, arr.size):] if arr.size else arr
