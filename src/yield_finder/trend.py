"""Seven-day APY trend labels."""

from __future__ import annotations

UP_THRESHOLD = 5.0
DOWN_THRESHOLD = -5.0


def classify_trend(apy_pct_7d: float | None) -> str:
    if apy_pct_7d is None:
        return "stable"
    if apy_pct_7d > UP_THRESHOLD:
        return "up"
    if apy_pct_7d < DOWN_THRESHOLD:
        return "down"
    return "stable"


__all__ = ["classify_trend"]
