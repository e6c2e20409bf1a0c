"""Print an FX risk brief and the current risk metrics for a rate history.

Usage examples:
    python scripts/risk_brief.py --csv data/usdphp.csv
    python scripts/risk_brief.py --csv data/usdphp.csv --start 2025-01-01 --end 2025-03-31

The CSV needs `date` and `rate` columns.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import pandas as pd

from fxrisk.briefs import InsufficientDataError, build_risk_brief
from fxrisk.normalize import normalize_observations
from fxrisk.regime import regime_for_window, window_volatility
from fxrisk.risk import compute_risk_metrics
from fxrisk.scenarios import preset_scenarios
from fxrisk.zscore import build_fan_chart


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--csv", type=Path, required=True)
    parser.add_argument("--start", type=str, default=None)
    parser.add_argument("--end", type=str, default=None)
    parser.add_argument("--window", type=int, default=90, help="chart window in days for regime/fan chart")
    args = parser.parse_args()

    if not args.csv.exists():
        print(f"[WARN] No rate file at {args.csv}")
        return

    series = normalize_observations(pd.read_csv(args.csv))
    if args.start:
        series = series[series.index >= pd.Timestamp(args.start, tz="UTC")]
    if args.end:
        series = series[series.index < pd.Timestamp(args.end, tz="UTC") + pd.Timedelta(days=1)]

    try:
        brief = build_risk_brief(series)
    except InsufficientDataError as e:
        print(f"[WARN] {e}")
        return

    metrics = compute_risk_metrics(series)
    regime = regime_for_window(metrics, args.window)
    vol = window_volatility(metrics, args.window)
    fan = build_fan_chart(metrics.latest_rate, metrics.latest_date, vol)

    print(json.dumps(brief, indent=2, ensure_ascii=False))
    print(json.dumps(metrics.to_dict(), indent=2))
    print(f"Window regime ({args.window}D): {regime.value if regime else 'N/A'}")
    if fan.empty:
        print("Fan chart: not enough volatility history")
    else:
        print(fan.tail(1).to_string(index=False))

    print("Peso impact of preset moves (default basket):")
    print(preset_scenarios(latest_rate=metrics.latest_rate).to_string(index=False))


if __name__ == "__main__":
    main()
