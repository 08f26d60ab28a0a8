"""Week-over-week growth scoring (pure functions)."""

from __future__ import annotations


def calculate_trend(current: int, previous: int) -> float:
    """Percentage change from `previous` to `current`.

    A first appearance (previous == 0, current > 0) scores a flat 100 rather
    than infinity; nothing in either window scores 0.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100.0
