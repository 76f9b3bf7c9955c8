from __future__ import annotations

from dataclasses import dataclass, field

from sourdough.metrics import (
    EconomySample,
    MetricsCollector,
    PurchaseRecord,
    StallRecord,
)


@dataclass
class SimulationReport:
    """Container for simulation results and derived metrics."""

    economy_name: str = ""
    strategy_description: str = ""
    outcome: str = ""
    total_time: float = 0.0

    # Raw metrics
    samples: list[EconomySample] = field(default_factory=list)
    purchases: list[PurchaseRecord] = field(default_factory=list)
    stalls: list[StallRecord] = field(default_factory=list)
    feeds: int = 0
    feed_points: int = 0

    # Final state
    final_points: int = 0
    final_all_time_points: int = 0
    final_starter_level: int = 1
    final_producers: dict[str, int] = field(default_factory=dict)

    # Derived metrics
    first_purchase_times: dict[str, float] = field(default_factory=dict)
    purchase_counts: dict[str, int] = field(default_factory=dict)
    purchase_gaps: list[float] = field(default_factory=list)
    max_purchase_gap: float = 0.0
    mean_purchase_gap: float = 0.0
    purchases_per_minute: float = 0.0

    def first_purchase_time(self, kind_id: str) -> float | None:
        return self.first_purchase_times.get(kind_id)

    def points_series(self) -> list[tuple[float, int]]:
        """Return (time, points) series."""
        return [(s.time, s.points) for s in self.samples]

    def all_time_series(self) -> list[tuple[float, int]]:
        return [(s.time, s.all_time_points) for s in self.samples]

    def producer_series(self, producer_id: str) -> list[tuple[float, int]]:
        return [(s.time, s.producers.get(producer_id, 0)) for s in self.samples]

    def resource_series(self, resource_id: str) -> list[tuple[float, int]]:
        return [(s.time, s.resources.get(resource_id, 0)) for s in self.samples]


def build_report(
    collector: MetricsCollector,
    economy_name: str,
    strategy_description: str,
    outcome: str,
    total_time: float,
    final: EconomySample,
) -> SimulationReport:
    """Build a SimulationReport from collected metrics."""
    first_times: dict[str, float] = {}
    counts: dict[str, int] = {}
    for p in collector.purchases:
        first_times.setdefault(p.kind_id, p.time)
        counts[p.kind_id] = counts.get(p.kind_id, 0) + 1

    purchase_gaps: list[float] = []
    purchase_times = sorted(p.time for p in collector.purchases)
    if purchase_times:
        purchase_gaps.append(purchase_times[0])  # gap from t=0 to first purchase
        for i in range(1, len(purchase_times)):
            purchase_gaps.append(purchase_times[i] - purchase_times[i - 1])

    max_gap = max(purchase_gaps) if purchase_gaps else 0.0
    mean_gap = (sum(purchase_gaps) / len(purchase_gaps)) if purchase_gaps else 0.0
    ppm = (len(collector.purchases) / total_time * 60.0) if total_time > 0 else 0.0

    return SimulationReport(
        economy_name=economy_name,
        strategy_description=strategy_description,
        outcome=outcome,
        total_time=total_time,
        samples=collector.samples,
        purchases=collector.purchases,
        stalls=collector.stalls,
        feeds=collector.feeds,
        feed_points=collector.feed_points,
        final_points=final.points,
        final_all_time_points=final.all_time_points,
        final_starter_level=final.starter_level,
        final_producers=dict(final.producers),
        first_purchase_times=first_times,
        purchase_counts=counts,
        purchase_gaps=purchase_gaps,
        max_purchase_gap=max_gap,
        mean_purchase_gap=mean_gap,
        purchases_per_minute=ppm,
    )
