"""Peso impact scenarios.

What-if maths for a USD/PHP move: given a few peso spending buckets and the
share of each that follows the dollar, how many pesos does a +/- X% move in
the rate add or save?

Moves are simple percentage moves of the rate (new / old - 1), not log
returns. Positive delta means the basket costs more because USD strengthened.
This simulates an FX move; it is not a prediction.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .stats import simple_returns


PRESET_MOVES_PCT = (-3.0, -1.0, 1.0, 3.0)
MAX_BUCKET_AMOUNT = 2_000_000
IMPACT_SCALE = 12.0


@dataclass
class SpendBucket:
    key: str
    title: str
    amount: float  # base peso spend
    exposure: float  # 0..1, share that follows USD
    what_moves: str = ""


@dataclass
class BucketImpact:
    """Per-bucket detail output for an impact scenario."""

    key: str
    title: str
    amount: float
    exposure: float
    exposure_peso: float
    delta: float
    new_amount: float


@dataclass
class ScenarioResult:
    name: str
    shock_description: str
    move_pct: float
    total_delta: float
    impact_score: float
    shocked_rate: Optional[float] = None


DEFAULT_BUCKETS = (
    SpendBucket(
        "groceries", "Groceries", 4000, 0.25,
        "Imports and fuel-linked costs usually get pricier when USD rises.",
    ),
    SpendBucket(
        "travel", "Travel", 60000, 0.85,
        "Most travel costs are USD-linked or USD-sensitive.",
    ),
    SpendBucket(
        "rent", "Rent / tuition", 25000, 0.12,
        "Some contracts and school costs indirectly follow USD moves.",
    ),
    SpendBucket(
        "shopping", "Online shopping", 5000, 0.7,
        "Cross-border pricing and card FX conversion track USD.",
    ),
)


def make_bucket(key: str, title: str, amount: float, exposure: float, what_moves: str = "") -> SpendBucket:
    """Bucket with amount rounded into [0, 2,000,000] pesos and exposure clipped to [0, 1]."""
    amount = float(np.clip(round(float(amount)), 0, MAX_BUCKET_AMOUNT))
    exposure = float(np.clip(float(exposure), 0.0, 1.0))
    return SpendBucket(key, title, amount, exposure, what_moves)


def move_pct_between(spot: float, target: float) -> Optional[float]:
    """Simple percentage move from ``spot`` to ``target``."""
    r = simple_returns([spot, target])
    if r.size == 0:
        return None
    return float(r[0] * 100.0)


def shocked_rate(spot: float, move_pct: float) -> float:
    return float(spot) * (1.0 + float(move_pct) / 100.0)


def bucket_impact(bucket: SpendBucket, move_pct: float) -> BucketImpact:
    exposure_peso = bucket.amount * bucket.exposure
    delta = exposure_peso * float(move_pct) / 100.0
    return BucketImpact(
        key=bucket.key,
        title=bucket.title,
        amount=bucket.amount,
        exposure=bucket.exposure,
        exposure_peso=exposure_peso,
        delta=delta,
        new_amount=bucket.amount + delta,
    )


def impact_score(buckets: Iterable[SpendBucket], move_pct: float) -> float:
    """0-100 intensity: |move| * 12 * mean exposure, clipped."""
    exposures = [b.exposure for b in buckets]
    if not exposures:
        return 0.0
    score = abs(float(move_pct)) * IMPACT_SCALE * float(np.mean(exposures))
    return float(np.clip(score, 0.0, 100.0))


def scenario_peso_impact(
    move_pct: float,
    buckets: Optional[Iterable[SpendBucket]] = None,
    latest_rate: Optional[float] = None,
) -> tuple[ScenarioResult, pd.DataFrame]:
    """Apply one USD/PHP move to every bucket.

    Returns (ScenarioResult, detail_df) with one detail row per bucket.
    """
    bucket_list = list(DEFAULT_BUCKETS if buckets is None else buckets)
    details = [bucket_impact(b, move_pct) for b in bucket_list]
    total = float(sum(d.delta for d in details))

    direction = "USD gets stronger" if move_pct >= 0 else "PHP gets stronger"
    res = ScenarioResult(
        name=f"USD/PHP {move_pct:+.1f}%",
        shock_description=f"{direction}; peso cost of USD-linked spending moves {move_pct:+.1f}%",
        move_pct=float(move_pct),
        total_delta=total,
        impact_score=impact_score(bucket_list, move_pct),
        shocked_rate=None if latest_rate is None else shocked_rate(latest_rate, move_pct),
    )

    detail_df = pd.DataFrame(
        [asdict(d) for d in details],
        columns=["key", "title", "amount", "exposure", "exposure_peso", "delta", "new_amount"],
    )
    return res, detail_df


def preset_scenarios(
    buckets: Optional[Iterable[SpendBucket]] = None,
    latest_rate: Optional[float] = None,
) -> pd.DataFrame:
    """Summary frame of the preset -3/-1/+1/+3% moves."""
    bucket_list = list(DEFAULT_BUCKETS if buckets is None else buckets)
    rows = [asdict(scenario_peso_impact(m, bucket_list, latest_rate)[0]) for m in PRESET_MOVES_PCT]
    return pd.DataFrame(rows)
