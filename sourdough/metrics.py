from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sourdough.state import EconomyState


@dataclass
class EconomySample:
    time: float
    points: int
    all_time_points: int
    starter_level: int
    producers: dict[str, int] = field(default_factory=dict)
    resources: dict[str, int] = field(default_factory=dict)


@dataclass
class PurchaseRecord:
    time: float
    kind_id: str
    cost_paid: dict[str, int]
    points_after: int


@dataclass
class StallRecord:
    time: float
    duration: float = 0.0


class MetricsCollector:
    """Collects simulation metrics at configurable intervals."""

    def __init__(self, snapshot_interval: float = 1.0) -> None:
        self.snapshot_interval = snapshot_interval
        self._last_snapshot_time: float = -1.0

        self.samples: list[EconomySample] = []
        self.purchases: list[PurchaseRecord] = []
        self.stalls: list[StallRecord] = []
        self.feeds: int = 0
        self.feed_points: int = 0

    def record_tick(self, state: EconomyState) -> None:
        """Record a sample if enough time has passed."""
        if state.time_elapsed - self._last_snapshot_time >= self.snapshot_interval:
            self._take_sample(state)
            self._last_snapshot_time = state.time_elapsed

    def record_purchase(
        self,
        state: EconomyState,
        kind_id: str,
        cost_paid: dict[str, int],
    ) -> None:
        self.purchases.append(
            PurchaseRecord(
                time=state.time_elapsed,
                kind_id=kind_id,
                cost_paid=dict(cost_paid),
                points_after=state.points,
            )
        )

    def record_feed(self, amount: int) -> None:
        self.feeds += 1
        self.feed_points += amount

    def record_stall(self, state: EconomyState, duration: float = 0.0) -> None:
        self.stalls.append(StallRecord(time=state.time_elapsed, duration=duration))

    def _take_sample(self, state: EconomyState) -> None:
        self.samples.append(
            EconomySample(
                time=state.time_elapsed,
                points=state.points,
                all_time_points=state.all_time_points,
                starter_level=state.starter_level,
                producers=dict(state.producers),
                resources=dict(state.resources),
            )
        )
