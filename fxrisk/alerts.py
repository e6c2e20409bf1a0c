"""FX alert engine.

Evaluates a rate series against a fixed set of rules and returns the alerts
that are allowed to fire, plus the updated cooldown ledger.

Read each alert like this: signal -> why care -> next step.

Rules, in order:
1) Readiness gate (not enough clean history -> single INFO, stop)
2) Deviation from the 90D mean via z-score (3 tiers)
3) Volatility jump, 30D vs 90D (2 tiers)
4) 20D range break
5) All clear when nothing fired

The ledger maps alert id -> ISO timestamp of the last firing. It is passed in
and returned; the caller persists it. Callers sharing one ledger across
processes must serialise read-evaluate-write themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from .config import SETTINGS
from .normalize import as_series, count_dated
from .risk import rolling_vol_strict
from .zscore import deviation_band, z_score


logger = logging.getLogger(__name__)


class AlertSeverity(str, Enum):
    CRITICAL = "CRITICAL"
    ALERT = "ALERT"
    WATCH = "WATCH"
    INFO = "INFO"


COOLDOWN_HOURS = {
    AlertSeverity.CRITICAL: 12,
    AlertSeverity.ALERT: 24,
    AlertSeverity.WATCH: 24,
    AlertSeverity.INFO: 6,
}

WAITING_ID = "system:waiting_for_history"
ALL_CLEAR_ID = "system:all_clear"

Z_WINDOW = 90
RANGE_LOOKBACK = 20


@dataclass(frozen=True)
class AlertRecord:
    id: str
    severity: AlertSeverity
    title: str
    signal: str
    why_care: str
    next_step: str
    timestamp: str
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "title": self.title,
            "signal": self.signal,
            "whyCare": self.why_care,
            "nextStep": self.next_step,
            "timestampISO": self.timestamp,
            "meta": dict(self.meta),
        }


@dataclass
class AlertDiagnostics:
    """Input quality for one evaluation.

    ``total_points`` counts rows with a parseable date; ``numeric_points``
    those that also carry a usable rate.
    """

    total_points: int
    numeric_points: int
    from_date: Optional[str]
    to_date: Optional[str]
    status: str
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPoints": self.total_points,
            "numericPoints": self.numeric_points,
            "fromISO": self.from_date,
            "toISO": self.to_date,
            "status": self.status,
            "reason": self.reason,
        }


@dataclass
class AlertPack:
    alerts: List[AlertRecord]
    fired_at: Dict[str, str]
    diagnostics: AlertDiagnostics
    latest: Optional[Tuple[pd.Timestamp, float]] = None
    z_score_90: Optional[float] = None
    band_90: Optional[pd.DataFrame] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "alerts": [a.to_dict() for a in self.alerts],
            "firedAt": dict(self.fired_at),
            "diagnostics": self.diagnostics.to_dict(),
            "zScore90": self.z_score_90,
        }
        if self.latest is not None:
            ts, rate = self.latest
            out["latest"] = {"dateISO": ts.isoformat(), "rate": rate}
        if self.band_90 is not None:
            out["series90"] = self.band_90.to_dict(orient="records")
        return out


def _utc(ts) -> pd.Timestamp:
    t = pd.Timestamp(ts)
    return t.tz_localize("UTC") if t.tzinfo is None else t.tz_convert("UTC")


def _last_fired(value: Any) -> Optional[pd.Timestamp]:
    ts = pd.to_datetime(value, errors="coerce", utc=True)
    if not isinstance(ts, pd.Timestamp) or pd.isna(ts):
        return None
    return ts


def can_fire(
    ledger: Mapping[str, str],
    alert_id: str,
    severity: AlertSeverity,
    now: pd.Timestamp,
) -> bool:
    """True if ``alert_id`` has never fired or its cooldown has elapsed."""
    prev = _last_fired(ledger.get(alert_id))
    if prev is None:
        return True
    return (now - prev) >= timedelta(hours=COOLDOWN_HOURS[severity])


class _Evaluation:
    """Collects alerts for one call and applies the cooldown gate."""

    def __init__(self, ledger: Dict[str, str], now: pd.Timestamp):
        self.ledger = ledger
        self.now = now
        self.now_iso = now.isoformat()
        self.alerts: List[AlertRecord] = []

    def fire(self, alert_id: str, severity: AlertSeverity, title: str, signal: str,
             why_care: str, next_step: str, meta: Optional[Dict[str, Any]] = None) -> None:
        if not can_fire(self.ledger, alert_id, severity, self.now):
            logger.debug("Alert %s suppressed by cooldown (last fired %s)", alert_id, self.ledger.get(alert_id))
            return
        self.alerts.append(
            AlertRecord(alert_id, severity, title, signal, why_care, next_step, self.now_iso, meta or {})
        )
        self.ledger[alert_id] = self.now_iso
        logger.info("Alert fired: %s (%s)", alert_id, severity.value)

    def record(self, alert_id: str, severity: AlertSeverity, title: str, signal: str,
               why_care: str, next_step: str, meta: Optional[Dict[str, Any]] = None) -> None:
        # system alerts bypass the cooldown and never touch the ledger
        self.alerts.append(
            AlertRecord(alert_id, severity, title, signal, why_care, next_step, self.now_iso, meta or {})
        )


def _range_break(rates: List[float], lookback: int) -> Optional[Tuple[str, float, float]]:
    if len(rates) < lookback:
        return None
    latest = rates[-1]
    prev = rates[-lookback:-1]
    lo, hi = min(prev), max(prev)
    if latest > hi:
        return "UP", hi, latest
    if latest < lo:
        return "DOWN", lo, latest
    return None


def _check_deviation(ev: _Evaluation, z: Optional[float], pair: str) -> None:
    if z is None:
        return
    abs_z = abs(z)
    meta = {"zScore90": round(abs_z, 2)}

    if abs_z >= 3:
        ev.fire(
            "move:rare", AlertSeverity.CRITICAL,
            "Rare move detected",
            f"{pair} is unusually far from its recent norm (|z| ≈ {abs_z:.2f}).",
            "Moves like this can force quick hedging decisions and stress limits.",
            "Review open exposure and hedge coverage immediately.",
            meta,
        )
    elif abs_z >= 2:
        ev.fire(
            "move:notable", AlertSeverity.ALERT,
            "Notable move detected",
            f"{pair} is outside its typical recent range (|z| ≈ {abs_z:.2f}).",
            "Deviations like this can move P&L and hedge effectiveness quickly.",
            "Check exposures and confirm hedge ratios still make sense today.",
            meta,
        )
    elif abs_z >= 1.5:
        ev.fire(
            "move:watch", AlertSeverity.WATCH,
            "Early warning: drift building",
            f"{pair} is drifting away from its mean (|z| ≈ {abs_z:.2f}).",
            "Drift can turn into a break if catalysts hit.",
            "Watch today's catalysts and avoid overconfidence in tight ranges.",
            meta,
        )


def _check_vol_jump(ev: _Evaluation, rates: List[float], trading_days: int) -> None:
    vol30 = rolling_vol_strict(rates, 30, trading_days)
    vol90 = rolling_vol_strict(rates, 90, trading_days)
    if vol30 is None or vol90 is None:
        return

    ratio = vol30 / max(1e-9, vol90)
    meta = {"ratio": round(ratio, 2)}

    if ratio >= 1.6:
        ev.fire(
            "vol:jump", AlertSeverity.ALERT,
            "Risk level jumped (vol upshift)",
            f"Recent swings are meaningfully larger than baseline (30D/90D ≈ {ratio:.2f}).",
            "Higher volatility raises VaR and makes hedges more expensive.",
            "Re-check limits and consider tightening hedge triggers.",
            meta,
        )
    elif ratio >= 1.3:
        ev.fire(
            "vol:rising", AlertSeverity.WATCH,
            "Volatility is rising",
            f"30D volatility is trending above baseline (30D/90D ≈ {ratio:.2f}).",
            "Rising vol is an early sign that ranges may break.",
            "Monitor catalysts and don't assume mean reversion will hold.",
            meta,
        )


def _check_range_break(ev: _Evaluation, rates: List[float], pair: str) -> None:
    rb = _range_break(rates, RANGE_LOOKBACK)
    if rb is None:
        return
    direction, ref, latest = rb
    dir_text = "above" if direction == "UP" else "below"
    ev.fire(
        "range:break20", AlertSeverity.ALERT,
        "Range break detected (20D)",
        f"{pair} moved {dir_text} its range of the last ~20 trading days.",
        "Range breaks often trigger follow-through and re-hedging.",
        "Validate hedge triggers and scale hedges if the break holds into the close.",
        {"direction": direction, "ref": round(ref, 3), "latest": round(latest, 3)},
    )


def build_alerts(
    data,
    fired_at: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
    min_points: Optional[int] = None,
    pair: Optional[str] = None,
    trading_days: Optional[int] = None,
) -> AlertPack:
    """Evaluate every alert rule against ``data``.

    ``data`` is a normalised rate series or raw ``(date, rate)`` records.
    ``fired_at`` is the caller's cooldown ledger; it is not mutated, the
    updated copy comes back as ``AlertPack.fired_at``.
    """
    now_ts = _utc(now if now is not None else datetime.now(timezone.utc))
    min_points = SETTINGS.min_history_points if min_points is None else min_points
    pair = pair or SETTINGS.pair
    trading_days = trading_days or SETTINGS.trading_days

    if data is None:
        data = []
    elif not isinstance(data, (pd.Series, pd.DataFrame)):
        data = list(data)
    total = count_dated(data)
    series = as_series(data)

    ledger: Dict[str, str] = dict(fired_at or {})
    ev = _Evaluation(ledger, now_ts)

    numeric = len(series)
    status = "LIVE" if numeric >= min_points else "WAITING"
    diagnostics = AlertDiagnostics(
        total_points=total,
        numeric_points=numeric,
        from_date=series.index[0].date().isoformat() if numeric else None,
        to_date=series.index[-1].date().isoformat() if numeric else None,
        status=status,
        reason=(
            f"Need at least {min_points} valid daily points to avoid noisy signals."
            if status == "WAITING" else None
        ),
    )

    if status == "WAITING":
        ev.record(
            WAITING_ID, AlertSeverity.INFO,
            "Alerts aren't ready yet",
            "Not enough clean history to set reliable thresholds.",
            "With small samples, alerts become spammy and untrustworthy.",
            "Load more daily history (90-180 days recommended); alerts enable automatically.",
            {"minNeeded": min_points},
        )
        return AlertPack(alerts=ev.alerts, fired_at=ledger, diagnostics=diagnostics)

    rates = [float(r) for r in series.to_numpy()]
    z = z_score(series, Z_WINDOW)

    _check_deviation(ev, z, pair)
    _check_vol_jump(ev, rates, trading_days)
    _check_range_break(ev, rates, pair)

    if not ev.alerts:
        ev.record(
            ALL_CLEAR_ID, AlertSeverity.INFO,
            "All clear (no risk triggers right now)",
            f"{pair} is behaving within expected bounds for this window.",
            "Quiet is good: no meaningful regime or range signal tripped.",
            "Review upcoming catalysts and keep hedge discipline.",
        )

    return AlertPack(
        alerts=ev.alerts,
        fired_at=ledger,
        diagnostics=diagnostics,
        latest=(series.index[-1], rates[-1]),
        z_score_90=z,
        band_90=deviation_band(series, Z_WINDOW),
    )
