"""FX risk brief.

Builds a plain-data summary report for a period of rates: key metrics,
regime, behaviour, implied 30-day move and a hedge-readiness call, plus the
narrative wording that goes with them.

The implied move is a volatility envelope (vol * sqrt(days / 252)), not a
prediction of where USD/PHP will trade.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .config import SETTINGS
from .normalize import as_series, to_observations
from .regime import FxBehaviorLabel, RegimeLabel, classify_fx_behavior, classify_regime
from .risk import rolling_vol_strict
from .stats import TRADING_DAYS


BRIEF_VOL_WINDOW = 30
RISK_SCORE_FULL_SCALE_PCT = 25.0


class InsufficientDataError(ValueError):
    """Raised when a period has too few points to build a brief."""


class TreasurySignal(str, Enum):
    LOW_RISK = "LOW_RISK"
    MODERATE_RISK = "MODERATE_RISK"
    ELEVATED_RISK = "ELEVATED_RISK"


class HedgeReadiness(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


REGIME_WORDS = {
    RegimeLabel.LOW: {
        "dynamics": "subdued",
        "predictability": "greater",
        "sensitivity": "lower",
        "planning": "longer planning horizons",
    },
    RegimeLabel.NORMAL: {
        "dynamics": "typical",
        "predictability": "moderate",
        "sensitivity": "standard",
        "planning": "standard assumptions",
    },
    RegimeLabel.HIGH: {
        "dynamics": "elevated",
        "predictability": "reduced",
        "sensitivity": "higher",
        "planning": "heightened caution",
    },
}

_READINESS = {
    (RegimeLabel.HIGH, FxBehaviorLabel.DIRECTIONAL_WITH_SWINGS): (
        HedgeReadiness.HIGH,
        "Volatility is elevated and price action is directional with sizable swings. "
        "Tighten monitoring and raise hedge urgency for open USD exposures.",
    ),
    (RegimeLabel.HIGH, FxBehaviorLabel.CHOPPY): (
        HedgeReadiness.HIGH,
        "Volatility is elevated with uneven swings. Timing risk is high; favour earlier "
        "execution windows for near-term USD flows.",
    ),
    (RegimeLabel.HIGH, None): (
        HedgeReadiness.HIGH,
        "Volatility is elevated. Even without a clear direction, short-term outcomes are "
        "less predictable, so hedge readiness should be high.",
    ),
    (RegimeLabel.NORMAL, FxBehaviorLabel.DIRECTIONAL_WITH_SWINGS): (
        HedgeReadiness.MEDIUM,
        "Volatility is within normal bounds but price action leans one way. Review exposure "
        "timing for USD-linked transactions.",
    ),
    (RegimeLabel.NORMAL, FxBehaviorLabel.CHOPPY): (
        HedgeReadiness.MEDIUM,
        "Volatility is typical but moves are choppy with frequent reversals. Keep execution "
        "windows disciplined.",
    ),
    (RegimeLabel.NORMAL, None): (
        HedgeReadiness.LOW,
        "Volatility is typical and price action looks contained. Routine monitoring and "
        "policy-aligned coverage are enough.",
    ),
    (RegimeLabel.LOW, FxBehaviorLabel.DIRECTIONAL_WITH_SWINGS): (
        HedgeReadiness.MEDIUM,
        "Volatility is subdued but price action shows a directional bias. Keep medium "
        "readiness for exposures sensitive to continued drift.",
    ),
    (RegimeLabel.LOW, FxBehaviorLabel.CHOPPY): (
        HedgeReadiness.MEDIUM,
        "Volatility is subdued but swings are uneven. Timing still matters for near-term "
        "USD flows.",
    ),
    (RegimeLabel.LOW, None): (
        HedgeReadiness.LOW,
        "Volatility is subdued and price action is stable. Near-term FX risk is limited.",
    ),
}


def implied_move_pct(
    vol_ann_pct: Optional[float],
    days: int = 30,
    trading_days: int = TRADING_DAYS,
) -> Optional[float]:
    """One-sigma move over ``days`` in percent, from annualised vol in percent."""
    if vol_ann_pct is None:
        return None
    return vol_ann_pct * math.sqrt(days / trading_days)


def treasury_signal(move_pct: Optional[float]) -> Optional[TreasurySignal]:
    if move_pct is None:
        return None
    if move_pct < 1:
        return TreasurySignal.LOW_RISK
    if move_pct <= 2:
        return TreasurySignal.MODERATE_RISK
    return TreasurySignal.ELEVATED_RISK


def hedge_readiness(
    regime: RegimeLabel,
    behavior: Optional[FxBehaviorLabel],
) -> tuple[HedgeReadiness, str]:
    if behavior == FxBehaviorLabel.RANGE_BOUND:
        behavior = None
    return _READINESS[(regime, behavior)]


def risk_score(vol_pct: Optional[float]) -> int:
    """0-100 gauge where 25% annualised vol or more reads as 100."""
    if vol_pct is None:
        return 0
    score = int(math.floor(vol_pct / RISK_SCORE_FULL_SCALE_PCT * 100 + 0.5))
    return max(0, min(100, score))


def regime_interpretation(regime: RegimeLabel) -> str:
    w = REGIME_WORDS[regime]
    return (
        f"In the current regime, FX volatility reflects {w['dynamics']} price dynamics "
        f"relative to historical norms. This implies {w['predictability']} predictability "
        f"in short-term exchange-rate moves and {w['sensitivity']} sensitivity to economic "
        f"or policy news, so FX risk in this period should be read with {w['planning']}."
    )


def build_risk_brief(
    series,
    pair: Optional[str] = None,
    source: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict:
    """Summary report for the rates in ``series`` (already cut to the period)."""
    s = as_series(series)
    if len(s) < 2:
        raise InsufficientDataError("Not enough data points for this period.")

    pair = pair or SETTINGS.pair
    source = source or SETTINGS.source
    generated = now or datetime.now(timezone.utc)

    rates = s.to_numpy(dtype=float)
    vol_dec = rolling_vol_strict(rates, BRIEF_VOL_WINDOW)
    vol_pct = None if vol_dec is None else vol_dec * 100.0

    regime = classify_regime(vol_pct)
    behavior = classify_fx_behavior(rates)
    move = implied_move_pct(vol_pct)
    signal = treasury_signal(move)

    readiness = None
    readiness_text = None
    if regime is not None:
        readiness, readiness_text = hedge_readiness(regime, behavior.label)

    min_ts, max_ts, last_ts = s.idxmin(), s.idxmax(), s.index[-1]
    vol_display = (
        f"N/A (needs >= {BRIEF_VOL_WINDOW + 1} pts)" if vol_pct is None else f"{vol_pct:.2f}%"
    )

    return {
        "meta": {
            "title": f"FX Risk Summary Report: {pair}",
            "pair": pair,
            "source": source,
            "period": {
                "start": s.index[0].date().isoformat(),
                "end": last_ts.date().isoformat(),
            },
            "generatedAt": generated.isoformat(),
        },
        "metrics": {
            "latestExchangeRate": {"value": float(rates[-1]), "date": last_ts.date().isoformat()},
            "periodMin": {"value": float(s.min()), "date": min_ts.date().isoformat()},
            "periodMax": {"value": float(s.max()), "date": max_ts.date().isoformat()},
            "rollingVolatility": {
                "valueAnnPct30d": vol_pct,
                "display": vol_display,
                "window": BRIEF_VOL_WINDOW,
            },
            "volatilityRegime": regime.value if regime else None,
            "riskScore": risk_score(vol_pct),
            "fxBehavior": behavior.to_dict(),
        },
        "treasury": {
            "impliedMovePct": move,
            "signal": signal.value if signal else None,
            "hedgeReadiness": readiness.value if readiness else None,
            "hedgeReadinessText": readiness_text,
        },
        "narrative": {
            "regimeInterpretation": regime_interpretation(regime) if regime else None,
        },
        "data": {
            "count": len(s),
            "points": [
                {"date": o.timestamp.date().isoformat(), "rate": o.rate} for o in to_observations(s)
            ],
        },
    }
