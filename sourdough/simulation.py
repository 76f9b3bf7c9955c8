from __future__ import annotations

import logging

from sourdough.definition import EconomyDefinition
from sourdough.engine import EconomyEngine
from sourdough.metrics import EconomySample, MetricsCollector
from sourdough.report import SimulationReport, build_report
from sourdough.strategy import Strategy

logger = logging.getLogger(__name__)

MAX_TICKS = 10_000_000


class Simulation:
    """Orchestrates a headless playthrough of an economy definition."""

    def __init__(
        self,
        definition: EconomyDefinition,
        strategy: Strategy,
        duration: float,
        tick_resolution: float | None = None,
        stall_after: float | None = None,
    ) -> None:
        self.definition = definition
        self.strategy = strategy
        self.duration = duration
        if tick_resolution is None:
            tick_resolution = definition.config.tick_resolution
        self.tick_resolution = tick_resolution
        self.stall_after = stall_after

        self.engine = EconomyEngine(definition)
        self.collector = MetricsCollector(snapshot_interval=tick_resolution)
        self.last_purchase_time = 0.0

    def run(self) -> SimulationReport:
        state = self.engine.get_state()
        tick_count = 0
        outcome = "Duration reached"

        end_ms = int(round(self.duration * 1000))
        step_ms = max(1, int(round(self.tick_resolution * 1000)))

        while state.clock_ms < end_ms:
            tick_count += 1
            if tick_count > MAX_TICKS:
                outcome = "Max ticks reached"
                break

            # 1. Advance time
            delta_ms = min(step_ms, end_ms - state.clock_ms)
            self.engine.advance_ms(delta_ms)
            step = delta_ms / 1000.0

            # 2. Feed the starter
            for _ in range(self.strategy.get_feeds(state, step)):
                self.collector.record_feed(self.engine.feed())

            # 3. Evaluate purchases
            affordable = self.engine.get_affordable_purchases()
            for kind_id in self.strategy.decide_purchases(state, affordable):
                cost = self.engine.current_cost(kind_id)
                if self.engine.purchase(kind_id):
                    self.collector.record_purchase(state, kind_id, cost)
                    self.last_purchase_time = state.time_elapsed

            # 4. Record metrics
            self.collector.record_tick(state)

            if (
                self.stall_after is not None
                and state.time_elapsed - self.last_purchase_time >= self.stall_after
            ):
                self.collector.record_stall(
                    state, state.time_elapsed - self.last_purchase_time
                )
                outcome = "Stall detected"
                break

        logger.debug("Simulation finished after %d ticks: %s", tick_count, outcome)
        return self._build_report(outcome)

    def _build_report(self, outcome: str) -> SimulationReport:
        state = self.engine.get_state()
        final = EconomySample(
            time=state.time_elapsed,
            points=state.points,
            all_time_points=state.all_time_points,
            starter_level=state.starter_level,
            producers=dict(state.producers),
            resources=dict(state.resources),
        )
        return build_report(
            collector=self.collector,
            economy_name=self.definition.config.name,
            strategy_description=self.strategy.describe(),
            outcome=outcome,
            total_time=state.time_elapsed,
            final=final,
        )
