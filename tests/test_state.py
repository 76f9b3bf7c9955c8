"""Tests for state module."""
from sourdough.cost_scaling import CostScaling
from sourdough.definition import EconomyConfig, EconomyDefinition
from sourdough.effect import Effect
from sourdough.producer import ProducerDef
from sourdough.resource import ResourceDef
from sourdough.state import EconomyState, PlayerIdentity


def _make_definition() -> EconomyDefinition:
    return EconomyDefinition(
        config=EconomyConfig(name="Test"),
        resources=[ResourceDef("loaves"), ResourceDef("twists")],
        producers=[
            ProducerDef(
                "chef",
                base_cost={"points": 50},
                effects=[Effect.direct("points", 5.0)],
            ),
            ProducerDef(
                "stand",
                base_cost={"points": 1000},
                cost_scaling=CostScaling.exponential(1.08),
                effects=[Effect.level("stand", 60.0), Effect.bonus("stand", 10.0)],
            ),
        ],
    )


def test_initialization():
    state = EconomyState(_make_definition())
    assert state.points == 0
    assert state.all_time_points == 0
    assert state.starter_level == 1
    assert state.producers == {"chef": 0, "stand": 0}
    assert state.resources == {"loaves": 0, "twists": 0}
    assert state.levels == {"stand": 0}
    assert state.clock_ms == 0
    assert state.identity is None


def test_time_elapsed_in_seconds():
    state = EconomyState(_make_definition())
    state.clock_ms = 12_500
    assert state.time_elapsed == 12.5


def test_unknown_ids_count_zero():
    state = EconomyState(_make_definition())
    assert state.producer_count("nonexistent") == 0
    assert state.resource_count("nonexistent") == 0
    assert state.level("nonexistent") == 0


def test_holding_resolves_points_resources_and_producers():
    state = EconomyState(_make_definition())
    state.points = 7
    state.resources["loaves"] = 3
    state.producers["chef"] = 2
    assert state.holding("points") == 7
    assert state.holding("loaves") == 3
    assert state.holding("chef") == 2
    assert state.holding("nonexistent") == 0


def test_identity_is_frozen():
    identity = PlayerIdentity(42, "baker")
    assert identity.player_id == 42
    assert identity.username == "baker"
    assert identity == PlayerIdentity(42, "baker")
