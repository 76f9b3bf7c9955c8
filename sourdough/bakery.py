"""The sourdough bakery: default economy catalogue."""
from __future__ import annotations

from sourdough.cost_scaling import CostScaling
from sourdough.definition import EconomyConfig, EconomyDefinition
from sourdough.effect import Effect
from sourdough.producer import ProducerDef
from sourdough.recipe import OutputKind, RecipeDef
from sourdough.resource import ResourceDef

CHEF_INTERVAL = 5.0
BAKER_INTERVAL = 20.0
MANAGER_INTERVAL = 30.0
STAND_LEVEL_INTERVAL = 60.0
STAND_BONUS_INTERVAL = 10.0


def define_economy() -> EconomyDefinition:
    return EconomyDefinition(
        config=EconomyConfig(
            name="Idle Sourdough Starter",
            tick_resolution=0.25,
            autosave_interval=30.0,
            leaderboard_limit=10,
        ),
        resources=[
            ResourceDef("loaves", display_name="Loaves"),
            ResourceDef("twists", display_name="Twists"),
        ],
        producers=[
            ProducerDef(
                id="chef",
                display_name="Chef",
                description="Generates 1 point every 5 seconds without clicking.",
                base_cost={"points": 50},
                cost_scaling=CostScaling.exponential(1.02, cap=10_000),
                effects=[Effect.direct("points", CHEF_INTERVAL)],
            ),
            ProducerDef(
                id="baker",
                display_name="Baker",
                description="Bakes 1 loaf every 20 seconds.",
                base_cost={"points": 400},
                cost_scaling=CostScaling.exponential(1.05, cap=25_000),
                effects=[Effect.direct("loaves", BAKER_INTERVAL)],
            ),
            ProducerDef(
                id="manager",
                display_name="Hiring Manager",
                description="Hires 1 chef every 30 seconds at no cost.",
                base_cost={"points": 2_500},
                cost_scaling=CostScaling.exponential(1.10, cap=100_000),
                effects=[Effect.meta("chef", MANAGER_INTERVAL)],
            ),
            ProducerDef(
                id="stand",
                display_name="Bread Stand",
                description=(
                    "Gains a level every minute and sells for bonus points "
                    "every 10 seconds; bonus grows with the stand level."
                ),
                base_cost={"points": 1_000, "loaves": 5},
                cost_scaling=CostScaling.exponential(1.08, cap=50_000),
                effects=[
                    Effect.level("stand", STAND_LEVEL_INTERVAL),
                    Effect.bonus("stand", STAND_BONUS_INTERVAL),
                ],
            ),
        ],
        recipes=[
            RecipeDef(
                id="bake_loaf",
                display_name="Bake a Loaf",
                description="Bake a fresh sourdough loaf for 200 points.",
                inputs={"points": 200},
                cost_scaling=CostScaling.fixed(),
                output_kind=OutputKind.RESOURCE,
                output="loaves",
            ),
            RecipeDef(
                id="braid_twists",
                display_name="Braid Twists",
                description="Braid 3 loaves of dough into 2 twists.",
                inputs={"loaves": 3},
                cost_scaling=CostScaling.fixed(),
                output_kind=OutputKind.RESOURCE,
                output="twists",
                batch=2,
            ),
            RecipeDef(
                id="upgrade_starter",
                display_name="Upgrade Starter",
                description="Each upgrade increases points per feed by 1.",
                inputs={"loaves": 10, "twists": 5},
                cost_scaling=CostScaling.exponential(1.15, cap=1_000),
                output_kind=OutputKind.STARTER_LEVEL,
                category="upgrades",
            ),
        ],
    )
