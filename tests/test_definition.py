"""Tests for definition validation and lookups."""
from sourdough.cost_scaling import CostScaling
from sourdough.definition import EconomyConfig, EconomyDefinition
from sourdough.effect import Effect, EffectDef, EffectType
from sourdough.producer import ProducerDef
from sourdough.recipe import OutputKind, RecipeDef
from sourdough.resource import ResourceDef


def _valid() -> EconomyDefinition:
    return EconomyDefinition(
        config=EconomyConfig(name="Valid"),
        resources=[ResourceDef("loaves")],
        producers=[
            ProducerDef(
                "chef",
                base_cost={"points": 50},
                cost_scaling=CostScaling.exponential(1.02, cap=10_000),
                effects=[Effect.direct("points", 5.0)],
            ),
            ProducerDef(
                "manager",
                base_cost={"points": 2500},
                effects=[Effect.meta("chef", 30.0)],
            ),
        ],
        recipes=[
            RecipeDef(
                "bake_loaf",
                inputs={"points": 200},
                output_kind=OutputKind.RESOURCE,
                output="loaves",
            ),
        ],
    )


def test_valid_definition_has_no_errors():
    assert _valid().validate() == []


def test_lookups():
    defn = _valid()
    assert defn.get_producer("chef").display_name == "chef"
    assert defn.get_recipe("bake_loaf").output == "loaves"
    assert defn.get_resource("loaves").id == "loaves"
    assert defn.get_producer("nope") is None
    assert defn.purchasable_ids() == ["chef", "manager", "bake_loaf"]


def test_level_keys_from_level_and_bonus_effects():
    defn = EconomyDefinition(
        producers=[
            ProducerDef(
                "stand",
                base_cost={"points": 1},
                effects=[Effect.level("stand", 60.0), Effect.bonus("stand", 10.0)],
            ),
            ProducerDef(
                "kiosk",
                base_cost={"points": 1},
                effects=[Effect.bonus("kiosk", 10.0)],
            ),
        ]
    )
    assert defn.level_keys() == ["stand", "kiosk"]


def test_duplicate_ids():
    defn = EconomyDefinition(
        resources=[ResourceDef("chef")],
        producers=[ProducerDef("chef", base_cost={"points": 1})],
    )
    assert any("Duplicate" in e for e in defn.validate())


def test_points_id_reserved():
    defn = EconomyDefinition(resources=[ResourceDef("points")])
    assert any("reserved" in e for e in defn.validate())


def test_unknown_cost_holding():
    defn = EconomyDefinition(
        producers=[ProducerDef("chef", base_cost={"gold": 1})],
    )
    assert any("unknown holding 'gold'" in e for e in defn.validate())


def test_growth_below_one_rejected():
    defn = EconomyDefinition(
        producers=[
            ProducerDef(
                "chef",
                base_cost={"points": 50},
                cost_scaling=CostScaling.exponential(0.9),
            )
        ],
    )
    assert any("growth rate" in e for e in defn.validate())


def test_non_positive_interval_rejected():
    defn = EconomyDefinition(
        producers=[
            ProducerDef(
                "chef",
                base_cost={"points": 50},
                effects=[EffectDef(EffectType.DIRECT, "points", interval=0.0)],
            )
        ],
    )
    assert any("interval" in e for e in defn.validate())


def test_meta_target_must_be_producer():
    defn = EconomyDefinition(
        producers=[
            ProducerDef(
                "manager",
                base_cost={"points": 1},
                effects=[Effect.meta("ghost", 30.0)],
            )
        ],
    )
    assert any("unknown producer 'ghost'" in e for e in defn.validate())


def test_recipe_output_and_batch_checked():
    defn = EconomyDefinition(
        recipes=[
            RecipeDef("braid", inputs={"points": 1}, output="twists", batch=0),
        ],
    )
    errors = defn.validate()
    assert any("unknown resource 'twists'" in e for e in errors)
    assert any("batch" in e for e in errors)
