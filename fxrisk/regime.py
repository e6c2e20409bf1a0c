"""Volatility regime and FX behaviour classification.

Regime thresholds are fixed business rules on annualised volatility in
percent: below 8 is LOW, 8 to 15 inclusive is NORMAL, above 15 is HIGH.

The behaviour classifier looks at a window of prices and asks whether the
pair stayed in a range, chopped around, or trended. Its thresholds scale with
sqrt(days / 7) so a 90-day window is judged on the same footing as a week.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

import numpy as np

from .risk import RiskMetrics


LOW_VOL_MAX_PCT = 8.0
NORMAL_VOL_MAX_PCT = 15.0


class RegimeLabel(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"


class FxBehaviorLabel(str, Enum):
    RANGE_BOUND = "RANGE_BOUND"
    CHOPPY = "CHOPPY"
    DIRECTIONAL_WITH_SWINGS = "DIRECTIONAL_WITH_SWINGS"


RANGE_BOUND_TEXT = (
    "USD/PHP traded within a narrow range over the period, pointing to stable "
    "short-term conditions and limited urgency for immediate hedging."
)
CHOPPY_TEXT = (
    "USD/PHP moved unevenly, with frequent short-term swings but no clear trend. "
    "Timing risk on USD transactions is higher than the net move suggests."
)
DIRECTIONAL_TEXT = (
    "USD/PHP made a clear directional move over the period, with sizable "
    "day-to-day swings along the way. Open USD exposures face adverse drift."
)
DIRECTIONAL_BIAS_TEXT = (
    "USD/PHP leans in one direction over the period, with day-to-day swings "
    "that can still move execution timing for USD exposures."
)
NOT_ENOUGH_DATA_TEXT = "N/A (needs more data points in the selected period)"


@dataclass
class FxBehavior:
    label: Optional[FxBehaviorLabel]
    range_pct: Optional[float]
    net_move_pct: Optional[float]
    reversals: Optional[int]
    explanation: str

    def to_dict(self) -> dict:
        return {
            "label": self.label.value if self.label else None,
            "rangePct": self.range_pct,
            "netMovePct": self.net_move_pct,
            "reversals": self.reversals,
            "userText": self.explanation,
        }


def classify_regime(vol_pct: Optional[float]) -> Optional[RegimeLabel]:
    """Map annualised volatility in percent (12.0, not 0.12) to a regime."""
    if vol_pct is None or not math.isfinite(vol_pct):
        return None
    if vol_pct < LOW_VOL_MAX_PCT:
        return RegimeLabel.LOW
    if vol_pct <= NORMAL_VOL_MAX_PCT:
        return RegimeLabel.NORMAL
    return RegimeLabel.HIGH


def window_volatility(metrics: RiskMetrics, window_days: int) -> Optional[float]:
    """Pick the vol estimate matching a chart window: 30D up to 30 days, else 90D."""
    return metrics.vol_30_ann if window_days <= 30 else metrics.vol_90_ann


def regime_for_window(metrics: RiskMetrics, window_days: int) -> Optional[RegimeLabel]:
    vol = window_volatility(metrics, window_days)
    return classify_regime(None if vol is None else vol * 100.0)


def count_reversals(rates: Iterable[float]) -> int:
    """Direction flips between consecutive non-zero moves; flat days are skipped."""
    deltas = np.sign(np.diff(np.asarray(list(rates), dtype=float)))
    moves = deltas[deltas != 0]
    if moves.size < 2:
        return 0
    return int(np.count_nonzero(moves[1:] != moves[:-1]))


def classify_fx_behavior(rates: Iterable[float]) -> FxBehavior:
    arr = np.asarray(list(rates), dtype=float)
    if arr.size < 3:
        return FxBehavior(None, None, None, None, NOT_ENOUGH_DATA_TEXT)

    lo, hi = float(arr.min()), float(arr.max())
    first, last = float(arr[0]), float(arr[-1])

    range_pct = (hi - lo) / lo * 100.0 if lo > 0 else 0.0
    net_move_pct = abs((last - first) / first * 100.0) if first != 0 else 0.0
    reversals = count_reversals(arr)

    days = max(2, arr.size - 1)
    scale = math.sqrt(days / 7)

    range_bound_range_max = 0.7 * scale
    range_bound_net_max = 0.4 * scale
    choppy_net_max = 0.8 * scale
    directional_net_min = 0.9 * scale

    if net_move_pct < range_bound_net_max and range_pct < range_bound_range_max:
        label, text = FxBehaviorLabel.RANGE_BOUND, RANGE_BOUND_TEXT
    elif net_move_pct < choppy_net_max and range_pct >= range_bound_range_max:
        label, text = FxBehaviorLabel.CHOPPY, CHOPPY_TEXT
    elif net_move_pct >= directional_net_min:
        label, text = FxBehaviorLabel.DIRECTIONAL_WITH_SWINGS, DIRECTIONAL_TEXT
    elif reversals >= max(2, days // 4):
        label, text = FxBehaviorLabel.CHOPPY, CHOPPY_TEXT
    else:
        label, text = FxBehaviorLabel.DIRECTIONAL_WITH_SWINGS, DIRECTIONAL_BIAS_TEXT

    return FxBehavior(label, range_pct, net_move_pct, reversals, text)
