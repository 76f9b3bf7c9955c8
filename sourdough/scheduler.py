from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from sourdough.effect import EffectDef

if TYPE_CHECKING:
    from sourdough.definition import EconomyDefinition
    from sourdough.state import EconomyState


@dataclass(frozen=True)
class ProductionClock:
    """One recurring timer: a producer's effect firing every interval_ms."""

    producer_id: str
    effect: EffectDef
    interval_ms: int

    def next_due(self, now_ms: int) -> int:
        return (now_ms // self.interval_ms + 1) * self.interval_ms

    def is_due(self, now_ms: int) -> bool:
        return now_ms > 0 and now_ms % self.interval_ms == 0


class ProductionScheduler:
    """Advances the virtual clock and fires due production effects.

    Each clock fires at every positive multiple of its interval, so phases
    are fully determined by ``state.clock_ms``. When several clocks are due
    at the same instant they fire in definition order (producer order, then
    effect order). Advancing by a large delta processes every intermediate
    firing in time order, which makes catch-up after a pause exact: one
    ``advance(3600_000)`` is equivalent to 3600 calls of ``advance(1000)``.
    """

    def __init__(self, definition: EconomyDefinition) -> None:
        self.clocks: list[ProductionClock] = [
            ProductionClock(p.id, eff, eff.interval_ms)
            for p in definition.producers
            for eff in p.effects
        ]

    def advance(
        self,
        state: EconomyState,
        delta_ms: int,
        fire: Callable[[ProductionClock], None],
    ) -> int:
        """Move ``state.clock_ms`` forward by *delta_ms*. Returns firing count."""
        if delta_ms <= 0:
            return 0
        target = state.clock_ms + delta_ms
        fired = 0
        while self.clocks:
            due = min(c.next_due(state.clock_ms) for c in self.clocks)
            if due > target:
                break
            state.clock_ms = due
            for clock in self.clocks:
                if clock.is_due(due):
                    fire(clock)
                    fired += 1
        state.clock_ms = target
        return fired

    def time_until_next(self, state: EconomyState, producer_id: str) -> float | None:
        """Seconds until the producer's next firing. None if it never fires."""
        dues = [
            c.next_due(state.clock_ms)
            for c in self.clocks
            if c.producer_id == producer_id
        ]
        if not dues:
            return None
        return (min(dues) - state.clock_ms) / 1000.0
