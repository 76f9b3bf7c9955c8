"""Tests for engine module."""
import threading

import pytest

from sourdough.bakery import define_economy
from sourdough.cost_scaling import CostScaling
from sourdough.definition import EconomyConfig, EconomyDefinition
from sourdough.effect import Effect, StateDelta
from sourdough.events import GainEvent, PurchaseEvent
from sourdough.engine import EconomyEngine
from sourdough.producer import ProducerDef
from sourdough.resource import ResourceDef


def _engine() -> EconomyEngine:
    return EconomyEngine(define_economy())


def test_initialization():
    engine = _engine()
    state = engine.get_state()
    assert state.points == 0
    assert state.all_time_points == 0
    assert state.starter_level == 1
    assert state.producers == {"chef": 0, "baker": 0, "manager": 0, "stand": 0}
    assert state.resources == {"loaves": 0, "twists": 0}


def test_invalid_definition_rejected():
    defn = EconomyDefinition(
        config=EconomyConfig(name="Broken"),
        producers=[ProducerDef("chef", base_cost={"gold": 1})],
    )
    with pytest.raises(ValueError, match="Invalid EconomyDefinition"):
        EconomyEngine(defn)


def test_feed_twice():
    engine = _engine()
    assert engine.feed() == 1
    assert engine.feed() == 1
    assert engine.state.points == 2
    assert engine.state.all_time_points == 2


def test_feed_scales_with_starter_level():
    engine = _engine()
    engine.state.starter_level = 4
    assert engine.feed() == 4
    assert engine.state.points == 4


def test_purchase_chef():
    engine = _engine()
    engine.state.points = 50
    engine.state.all_time_points = 50
    assert engine.purchase("chef")
    assert engine.state.points == 0
    assert engine.state.producers["chef"] == 1
    assert engine.state.all_time_points == 50
    assert engine.current_cost("chef") == {"points": 51}


def test_purchase_chef_one_short_is_noop():
    engine = _engine()
    engine.state.points = 49
    before = engine.snapshot().to_record()
    assert not engine.purchase("chef")
    assert engine.snapshot().to_record() == before


def test_multi_input_purchase_is_atomic():
    engine = _engine()
    engine.state.resources.update({"loaves": 10, "twists": 4})
    assert not engine.purchase("upgrade_starter")
    assert engine.state.resources == {"loaves": 10, "twists": 4}
    assert engine.state.starter_level == 1


def test_upgrade_starter():
    engine = _engine()
    engine.state.resources.update({"loaves": 10, "twists": 5})
    assert engine.purchase("upgrade_starter")
    assert engine.state.starter_level == 2
    assert engine.state.resources == {"loaves": 0, "twists": 0}
    # second upgrade scales from one level above the base
    assert engine.current_cost("upgrade_starter") == {"loaves": 11, "twists": 5}


def test_stand_needs_points_and_loaves():
    engine = _engine()
    engine.state.points = 5_000
    assert not engine.purchase("stand")
    engine.state.resources["loaves"] = 5
    assert engine.purchase("stand")
    assert engine.state.points == 4_000
    assert engine.state.resources["loaves"] == 0


def test_recipe_batch_output():
    engine = _engine()
    engine.state.resources["loaves"] = 3
    assert engine.purchase("braid_twists")
    assert engine.state.resources == {"loaves": 0, "twists": 2}


def test_unknown_kind_is_rejected():
    engine = _engine()
    engine.state.points = 10**6
    assert not engine.purchase("oven")
    assert engine.current_cost("oven") == {}
    assert not engine.can_afford("oven")
    assert engine.state.points == 10**6


def test_all_time_never_decreases_on_spend():
    engine = _engine()
    for _ in range(250):
        engine.feed()
    assert engine.purchase("bake_loaf")
    assert engine.state.points == 50
    assert engine.state.all_time_points == 250


def test_get_purchases_order_and_affordability():
    engine = _engine()
    engine.state.points = 400
    statuses = engine.get_purchases()
    assert [s.id for s in statuses] == [
        "chef", "baker", "manager", "stand",
        "bake_loaf", "braid_twists", "upgrade_starter",
    ]
    affordable = {s.id for s in engine.get_affordable_purchases()}
    assert affordable == {"chef", "baker", "bake_loaf"}
    upgrade = statuses[-1]
    assert upgrade.kind == "recipe"
    assert upgrade.category == "upgrades"
    assert upgrade.owned == 0


def test_production_rate():
    engine = _engine()
    engine.state.producers.update({"chef": 10, "stand": 2})
    engine.state.levels["stand"] = 1
    # 10 chefs / 5s + 2 stands * (1 + 1) / 10s
    assert engine.production_rate("points") == pytest.approx(2.4)
    assert engine.production_rate("loaves") == 0.0


def test_time_to_afford():
    engine = _engine()
    engine.state.producers["chef"] = 5
    # 55 points at one point per second
    assert engine.time_to_afford("chef") == pytest.approx(55.0)
    assert engine.time_to_afford("stand") is None
    engine.state.points = 1_000
    assert engine.time_to_afford("chef") == 0.0
    assert engine.time_to_afford("oven") is None


def test_listeners_receive_events():
    engine = _engine()
    events = []
    engine.add_listener(events.append)
    engine.add_listener(events.append)  # duplicate ignored
    engine.feed()
    engine.state.points = 50
    engine.purchase("chef")
    engine.tick(5.0)

    assert events[0] == GainEvent("feed", "points", 1, 0.0)
    assert isinstance(events[1], PurchaseEvent)
    assert events[1].cost_paid == {"points": 50}
    assert events[1].output == "chef"
    assert events[2] == GainEvent("chef", "points", 1, 5.0)
    assert len(events) == 3

    engine.remove_listener(events.append)
    engine.feed()
    assert len(events) == 3


def test_failing_listener_does_not_break_engine():
    engine = _engine()

    def broken(event):
        raise RuntimeError("boom")

    engine.add_listener(broken)
    assert engine.feed() == 1
    assert engine.state.points == 1


def _lock_free_elsewhere(engine) -> bool:
    result = []

    def attempt():
        acquired = engine._lock.acquire(blocking=False)
        if acquired:
            engine._lock.release()
        result.append(acquired)

    worker = threading.Thread(target=attempt)
    worker.start()
    worker.join()
    return result[0]


def test_listeners_run_after_lock_is_released():
    engine = _engine()
    engine.state.producers["chef"] = 1
    seen = []

    def listener(event):
        seen.append((type(event).__name__, _lock_free_elsewhere(engine)))

    engine.add_listener(listener)
    engine.feed()
    engine.tick(5.0)
    engine.state.points = 100
    engine.purchase("chef")
    assert [free for _, free in seen] == [True, True, True]
    assert [kind for kind, _ in seen] == ["GainEvent", "GainEvent", "PurchaseEvent"]


def test_queries_wait_for_lock():
    engine = _engine()
    costs = []
    engine._lock.acquire()
    try:
        worker = threading.Thread(target=lambda: costs.append(engine.current_cost("chef")))
        worker.start()
        worker.join(timeout=0.1)
        assert costs == []
    finally:
        engine._lock.release()
    worker.join()
    assert costs == [{"points": 50}]


def test_custom_effect_cannot_overdraw():
    def sell(state, count):
        return StateDelta(points=count * 10, resources={"loaves": -count})

    defn = EconomyDefinition(
        resources=[ResourceDef("loaves")],
        producers=[
            ProducerDef(
                "market",
                base_cost={"points": 1},
                cost_scaling=CostScaling.fixed(),
                effects=[Effect.custom(sell, 1.0)],
            ),
        ],
    )
    engine = EconomyEngine(defn)
    engine.state.producers["market"] = 2
    engine.state.resources["loaves"] = 3
    engine.tick(2.0)
    # first firing sells 2 loaves; second would go negative and is skipped
    assert engine.state.resources["loaves"] == 1
    assert engine.state.points == 20
    assert engine.state.all_time_points == 20


def test_assign_identity():
    engine = _engine()
    identity = engine.assign_identity(7, "alice")
    assert engine.state.identity == identity
    engine.assign_identity(7, "alice2")
    assert engine.state.identity.username == "alice2"
    with pytest.raises(ValueError, match="already assigned"):
        engine.assign_identity(8, "bob")


def test_reset_keeps_identity():
    engine = _engine()
    engine.assign_identity(3, "carol")
    engine.feed()
    engine.tick(12.0)
    engine.reset()
    assert engine.state.points == 0
    assert engine.state.clock_ms == 0
    assert engine.state.identity.player_id == 3
