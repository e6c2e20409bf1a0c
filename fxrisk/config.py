"""Project configuration.

You can override most settings using environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parents[1]
DATA_DIR = BASE_DIR / "data"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    # Instrument metadata carried into reports
    pair: str = os.getenv("FXRISK_PAIR", "USD/PHP")
    source: str = os.getenv("FXRISK_SOURCE", "BSP")

    # Alerts stay in WAITING until this many clean daily points exist
    min_history_points: int = _env_int("FXRISK_MIN_HISTORY_POINTS", 40)

    # Annualisation factor for daily volatility
    trading_days: int = _env_int("FXRISK_TRADING_DAYS", 252)

    # Default cooldown ledger file used by scripts/evaluate_alerts.py
    ledger_path: Path = Path(os.getenv("FXRISK_LEDGER_PATH", str(DATA_DIR / "alert_ledger.json")))


SETTINGS = Settings()
