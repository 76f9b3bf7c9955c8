from __future__ import annotations

import logging
import threading
from typing import Any

from sourdough.definition import EconomyDefinition
from sourdough.effect import EffectType, StateDelta
from sourdough.events import EconomyEvent, GainEvent, Listener, PurchaseEvent
from sourdough.producer import PurchaseStatus
from sourdough.recipe import OutputKind
from sourdough.resource import POINTS
from sourdough.scheduler import ProductionClock, ProductionScheduler
from sourdough.snapshot import EconomySnapshot
from sourdough.state import EconomyState, PlayerIdentity

logger = logging.getLogger(__name__)


class EconomyEngine:
    """Authoritative owner of one EconomyState.

    Every mutation (feed, purchase, tick, restore) runs under one re-entrant
    lock, so timer callbacks on other threads serialize against player
    actions instead of racing on the counters.
    """

    def __init__(self, definition: EconomyDefinition) -> None:
        errors = definition.validate()
        if errors:
            raise ValueError(
                "Invalid EconomyDefinition:\n" + "\n".join(f"  - {e}" for e in errors)
            )

        self.definition = definition
        self.state = EconomyState(definition)
        self.scheduler = ProductionScheduler(definition)
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()

    # ── Core loop ────────────────────────────────────────────────────

    def tick(self, delta: float) -> int:
        """Advance the economy by *delta* seconds. Returns effects fired."""
        return self.advance_ms(int(round(delta * 1000)))

    def advance_ms(self, delta_ms: int) -> int:
        """Advance the virtual clock by *delta_ms* milliseconds."""
        pending: list[EconomyEvent] = []
        with self._lock:
            fired = self.scheduler.advance(
                self.state, delta_ms, lambda clock: self._fire(clock, pending)
            )
        for event in pending:
            self._emit(event)
        return fired

    # ── Player actions ───────────────────────────────────────────────

    def feed(self) -> int:
        """Feed the starter. Returns the points awarded."""
        with self._lock:
            amount = self.state.starter_level
            self.state.points += amount
            self.state.all_time_points += amount
            event = GainEvent("feed", POINTS, amount, self.state.time_elapsed)
        self._emit(event)
        return amount

    def purchase(self, kind_id: str) -> bool:
        """Buy a producer or run a recipe. Returns True when applied.

        All inputs are checked against the current cost before anything is
        debited; an unaffordable or unknown kind leaves state untouched.
        """
        with self._lock:
            cost = self.current_cost(kind_id)
            if not cost:
                return False
            if not self._holds(cost):
                return False

            for cur_id, amount in cost.items():
                self._debit(cur_id, amount)

            producer = self.definition.get_producer(kind_id)
            if producer is not None:
                self.state.producers[kind_id] += 1
                output, amount = kind_id, 1
            else:
                recipe = self.definition.get_recipe(kind_id)
                output, amount = recipe.output, recipe.batch
                if recipe.output_kind is OutputKind.STARTER_LEVEL:
                    self.state.starter_level += amount
                    output = "starter_level"
                elif recipe.output_kind is OutputKind.PRODUCER:
                    self.state.producers[output] += amount
                else:
                    self.state.resources[output] += amount

            event = PurchaseEvent(kind_id, cost, output, amount, self.state.time_elapsed)
            logger.debug("Purchased %s for %s", kind_id, cost)
        self._emit(event)
        return True

    # ── Snapshots ────────────────────────────────────────────────────

    def snapshot(self) -> EconomySnapshot:
        with self._lock:
            return EconomySnapshot.from_state(self.state)

    def restore(self, record: EconomySnapshot | Any) -> None:
        """Replace every field from a snapshot or an untrusted record.

        An identity already assigned in this session is kept; a record's
        identity is adopted only when none is set yet.
        """
        if isinstance(record, EconomySnapshot):
            record = record.to_record()
        incoming = EconomySnapshot.from_record(record, self.definition)
        with self._lock:
            st = self.state
            st.points = incoming.points
            st.all_time_points = incoming.all_time_points
            st.starter_level = incoming.starter_level
            st.producers = dict(incoming.producers)
            st.resources = dict(incoming.resources)
            st.levels = dict(incoming.levels)
            st.clock_ms = incoming.clock_ms
            if st.identity is None:
                st.identity = incoming.identity

    def assign_identity(self, player_id: int, username: str = "") -> PlayerIdentity:
        """Set the player identity once; later calls may only rename."""
        with self._lock:
            current = self.state.identity
            if current is not None and current.player_id != player_id:
                raise ValueError(
                    f"Player id already assigned ({current.player_id}); cannot change to {player_id}"
                )
            self.state.identity = PlayerIdentity(player_id, username)
            return self.state.identity

    def reset(self) -> None:
        """Start over with zeroed counters, keeping the identity."""
        with self._lock:
            identity = self.state.identity
            self.state = EconomyState(self.definition)
            self.state.identity = identity

    # ── Queries ──────────────────────────────────────────────────────

    def get_state(self) -> EconomyState:
        """Return live reference to economy state."""
        return self.state

    def current_cost(self, kind_id: str) -> dict[str, int]:
        with self._lock:
            producer = self.definition.get_producer(kind_id)
            if producer is not None:
                return producer.cost_scaling.compute(
                    producer.base_cost, self.state.producer_count(kind_id)
                )
            recipe = self.definition.get_recipe(kind_id)
            if recipe is not None:
                return recipe.cost_scaling.compute(recipe.inputs, recipe.cost_basis(self.state))
            return {}

    def can_afford(self, kind_id: str) -> bool:
        with self._lock:
            cost = self.current_cost(kind_id)
            return bool(cost) and self._holds(cost)

    def get_purchases(self) -> list[PurchaseStatus]:
        """Status of every producer and recipe, in definition order."""
        result: list[PurchaseStatus] = []
        with self._lock:
            for p in self.definition.producers:
                result.append(self._status(p.id, p.display_name, "producer",
                                           self.state.producer_count(p.id), p.category))
            for r in self.definition.recipes:
                result.append(self._status(r.id, r.display_name, "recipe",
                                           r.cost_basis(self.state), r.category))
        return result

    def get_affordable_purchases(self) -> list[PurchaseStatus]:
        return [s for s in self.get_purchases() if s.affordable]

    def production_rate(self, target: str) -> float:
        """Steady-state units per second of *target* from DIRECT effects."""
        rate = 0.0
        with self._lock:
            for p in self.definition.producers:
                count = self.state.producer_count(p.id)
                if count <= 0:
                    continue
                for eff in p.effects:
                    if eff.type is EffectType.DIRECT and eff.target == target:
                        rate += count * eff.per_unit / eff.interval
                    elif eff.type is EffectType.BONUS and target == POINTS:
                        level = self.state.level(eff.level_key)
                        rate += count * eff.per_unit * (1 + level) / eff.interval
        return rate

    def time_to_afford(self, kind_id: str) -> float | None:
        """Seconds until affordable from passive production alone. None if never."""
        with self._lock:
            cost = self.current_cost(kind_id)
            if not cost:
                return None
            longest = 0.0
            for cur_id, amount in cost.items():
                have = self.state.holding(cur_id)
                if have >= amount:
                    continue
                rate = self.production_rate(cur_id)
                if rate <= 0:
                    return None
                longest = max(longest, (amount - have) / rate)
            return longest

    # ── Listeners ────────────────────────────────────────────────────

    def add_listener(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ── Private helpers ──────────────────────────────────────────────

    def _status(self, kind_id, name, kind, owned, category) -> PurchaseStatus:
        cost = self.current_cost(kind_id)
        return PurchaseStatus(
            id=kind_id,
            display_name=name,
            kind=kind,
            owned=owned,
            affordable=self._holds(cost),
            current_cost=cost,
            category=category,
        )

    def _holds(self, cost: dict[str, int]) -> bool:
        return all(self.state.holding(cid) >= amt for cid, amt in cost.items())

    def _debit(self, cur_id: str, amount: int) -> None:
        st = self.state
        if cur_id == POINTS:
            st.points -= amount
        elif cur_id in st.resources:
            st.resources[cur_id] -= amount
        else:
            st.producers[cur_id] -= amount

    def _fire(self, clock: ProductionClock, pending: list[EconomyEvent]) -> None:
        count = self.state.producer_count(clock.producer_id)
        delta = clock.effect.compute(self.state, count)
        if delta.is_empty():
            return
        if not self._apply_delta(delta):
            logger.debug("Skipped %s firing: delta %s would go negative", clock.producer_id, delta)
            return
        now = self.state.time_elapsed
        if delta.points > 0:
            pending.append(GainEvent(clock.producer_id, POINTS, delta.points, now))
        for group in (delta.resources, delta.producers, delta.levels):
            for target, amount in group.items():
                if amount > 0:
                    pending.append(GainEvent(clock.producer_id, target, amount, now))

    def _apply_delta(self, delta: StateDelta) -> bool:
        """Apply a production delta atomically. False if any counter would go negative."""
        st = self.state
        if st.points + delta.points < 0:
            return False
        for counters, changes in (
            (st.resources, delta.resources),
            (st.producers, delta.producers),
            (st.levels, delta.levels),
        ):
            for key, amount in changes.items():
                if key not in counters or counters[key] + amount < 0:
                    return False

        st.points += delta.points
        if delta.points > 0:
            st.all_time_points += delta.points
        for counters, changes in (
            (st.resources, delta.resources),
            (st.producers, delta.producers),
            (st.levels, delta.levels),
        ):
            for key, amount in changes.items():
                counters[key] += amount
        return True

    def _emit(self, event: EconomyEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed on %r", listener, event)
