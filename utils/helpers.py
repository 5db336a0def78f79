"""helpers.py - Reusable utility functions."""

from __future__ import annotations

from collections.abc import Callable


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def linear_curve(base: float, per_level: float) -> Callable[[float], float]:
    """Return ``d -> clamp(base + d * per_level)``, a difficulty curve in [0, 1]."""
    def curve(difficulty: float) -> float:
        return clamp(base + difficulty * per_level)
    return curve


# Used when an archetype doesn't define its own block / anti-air curve
default_curve = linear_curve(0.3, 0.04)
