"""Evaluate FX alerts for a rate history and persist the cooldown ledger.

Usage examples:
    python scripts/evaluate_alerts.py --csv data/usdphp.csv
    python scripts/evaluate_alerts.py --csv data/usdphp.csv --ledger data/alert_ledger.json --json

The CSV needs `date` and `rate` columns. The ledger file maps alert id to the
ISO timestamp it last fired; it is read before and rewritten after each run.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import pandas as pd

from fxrisk.alerts import build_alerts
from fxrisk.config import SETTINGS
from fxrisk.normalize import normalize_observations


def load_ledger(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"[WARN] Ignoring unreadable ledger {path}: {e}")
        return {}
    if not isinstance(data, dict):
        print(f"[WARN] Ignoring ledger {path}: expected a JSON object")
        return {}
    return {str(k): str(v) for k, v in data.items()}


def save_ledger(path: Path, ledger: dict[str, str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(ledger, indent=2, sort_keys=True), encoding="utf-8")


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--csv", type=Path, required=True)
    parser.add_argument("--ledger", type=Path, default=SETTINGS.ledger_path)
    parser.add_argument("--json", action="store_true", help="print the full alert pack as JSON")
    args = parser.parse_args()

    if not args.csv.exists():
        print(f"[WARN] No rate file at {args.csv}")
        series = normalize_observations([])
    else:
        series = normalize_observations(pd.read_csv(args.csv))

    ledger = load_ledger(args.ledger)
    pack = build_alerts(series, ledger)
    save_ledger(args.ledger, pack.fired_at)

    if args.json:
        print(json.dumps(pack.to_dict(), indent=2, default=str))
        return

    diag = pack.diagnostics
    print(f"{SETTINGS.pair} | {diag.status} | {diag.numeric_points} points ({diag.from_date} → {diag.to_date})")
    for a in pack.alerts:
        print(f"[{a.severity.value}] {a.title}")
        print(f"    signal: {a.signal}")
        print(f"    why care: {a.why_care}")
        print(f"    next step: {a.next_step}")


if __name__ == "__main__":
    main()
