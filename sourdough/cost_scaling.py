from __future__ import annotations

import math
from typing import Callable


def _capped_power(base: float, growth: float, count: int, cap: float | None) -> int:
    """floor(base * growth^count), clamped to *cap*, without float overflow."""
    if base <= 0 or (cap is not None and cap <= 0):
        return 0
    if cap is not None and growth > 1.0:
        # Compare in log space so huge counts plateau instead of overflowing.
        if math.log(base) + count * math.log(growth) >= math.log(cap):
            return math.floor(cap)
    try:
        value = math.floor(base * growth ** count)
    except OverflowError:
        if cap is None:
            raise
        return math.floor(cap)
    if cap is not None:
        value = min(value, math.floor(cap))
    return value


class CostScaling:
    """Determines how purchase costs change with the owned count."""

    growth_rate: float | None = None
    cap: float | None = None

    def __init__(self, fn: Callable[[dict[str, float], int], dict[str, int]]) -> None:
        self._fn = fn

    def compute(self, base_cost: dict[str, float], current_count: int) -> dict[str, int]:
        return self._fn(base_cost, current_count)

    @classmethod
    def fixed(cls) -> CostScaling:
        """Cost never changes."""
        return cls(lambda base, _count: {k: math.floor(v) for k, v in base.items()})

    @classmethod
    def exponential(cls, growth_rate: float = 1.15, cap: float | None = None) -> CostScaling:
        """Cost = min(floor(base * growth_rate^count), cap)."""
        gr = growth_rate
        limit = cap

        def _compute(base: dict[str, float], count: int) -> dict[str, int]:
            return {k: _capped_power(v, gr, count, limit) for k, v in base.items()}

        scaling = cls(_compute)
        scaling.growth_rate = gr
        scaling.cap = limit
        return scaling

    @classmethod
    def linear(cls, increment_pct: float = 0.10, cap: float | None = None) -> CostScaling:
        """Cost = min(floor(base * (1 + increment_pct * count)), cap)."""
        pct = increment_pct
        limit = cap

        def _compute(base: dict[str, float], count: int) -> dict[str, int]:
            mult = 1.0 + pct * count
            costs = {k: math.floor(v * mult) for k, v in base.items()}
            if limit is not None:
                costs = {k: min(v, math.floor(limit)) for k, v in costs.items()}
            return costs

        return cls(_compute)

    @classmethod
    def custom(cls, fn: Callable[[dict[str, float], int], dict[str, int]]) -> CostScaling:
        """Arbitrary cost function."""
        return cls(fn)
