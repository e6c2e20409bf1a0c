"""USD/PHP FX risk analytics: volatility, drawdown, z-scores, regimes and alerts."""
