from __future__ import annotations

from dataclasses import dataclass, field

from sourdough.effect import EffectType
from sourdough.producer import ProducerDef
from sourdough.recipe import OutputKind, RecipeDef
from sourdough.resource import POINTS, ResourceDef


@dataclass
class EconomyConfig:
    """Top-level economy configuration."""

    name: str = "Untitled"
    tick_resolution: float = 1.0
    autosave_interval: float = 30.0
    leaderboard_limit: int = 10


@dataclass
class EconomyDefinition:
    """Complete static definition of an economy: resources, producers, recipes."""

    config: EconomyConfig = field(default_factory=EconomyConfig)
    resources: list[ResourceDef] = field(default_factory=list)
    producers: list[ProducerDef] = field(default_factory=list)
    recipes: list[RecipeDef] = field(default_factory=list)

    # Lookup dicts built in __post_init__
    _resources_by_id: dict[str, ResourceDef] = field(
        default_factory=dict, init=False, repr=False
    )
    _producers_by_id: dict[str, ProducerDef] = field(
        default_factory=dict, init=False, repr=False
    )
    _recipes_by_id: dict[str, RecipeDef] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._resources_by_id = {r.id: r for r in self.resources}
        self._producers_by_id = {p.id: p for p in self.producers}
        self._recipes_by_id = {r.id: r for r in self.recipes}

    def get_resource(self, id: str) -> ResourceDef | None:
        return self._resources_by_id.get(id)

    def get_producer(self, id: str) -> ProducerDef | None:
        return self._producers_by_id.get(id)

    def get_recipe(self, id: str) -> RecipeDef | None:
        return self._recipes_by_id.get(id)

    def purchasable_ids(self) -> list[str]:
        return [p.id for p in self.producers] + [r.id for r in self.recipes]

    def level_keys(self) -> list[str]:
        """Leveling counters referenced by LEVEL or BONUS effects, in order."""
        keys: list[str] = []
        for p in self.producers:
            for eff in p.effects:
                key = None
                if eff.type is EffectType.LEVEL:
                    key = eff.target
                elif eff.type is EffectType.BONUS:
                    key = eff.level_key
                if key and key not in keys:
                    keys.append(key)
        return keys

    def validate(self) -> list[str]:
        """Check for common definition errors. Returns list of error messages."""
        errors: list[str] = []
        resource_ids = {r.id for r in self.resources}
        producer_ids = {p.id for p in self.producers}
        holding_ids = resource_ids | producer_ids | {POINTS}

        seen: set[str] = set()
        for kind_id in (
            [r.id for r in self.resources] + self.purchasable_ids()
        ):
            if kind_id == POINTS:
                errors.append(f"{POINTS!r} is reserved for the primary currency")
            if kind_id in seen:
                errors.append(f"Duplicate ID: {kind_id!r}")
            seen.add(kind_id)

        for p in self.producers:
            errors.extend(_check_cost(f"Producer {p.id!r}", p.base_cost, p.cost_scaling, holding_ids))
            for eff in p.effects:
                if eff.interval_ms <= 0:
                    errors.append(
                        f"Producer {p.id!r} has effect with non-positive interval {eff.interval!r}"
                    )
                if eff.type is EffectType.DIRECT and eff.target not in resource_ids | {POINTS}:
                    errors.append(
                        f"Producer {p.id!r} produces unknown resource {eff.target!r}"
                    )
                elif eff.type is EffectType.META and eff.target not in producer_ids:
                    errors.append(
                        f"Producer {p.id!r} hires unknown producer {eff.target!r}"
                    )
                elif eff.type is EffectType.CUSTOM and eff.fn is None:
                    errors.append(f"Producer {p.id!r} has custom effect without fn")

        for r in self.recipes:
            errors.extend(_check_cost(f"Recipe {r.id!r}", r.inputs, r.cost_scaling, holding_ids))
            if r.batch < 1:
                errors.append(f"Recipe {r.id!r} has batch {r.batch} < 1")
            if r.output_kind is OutputKind.RESOURCE and r.output not in resource_ids:
                errors.append(f"Recipe {r.id!r} outputs unknown resource {r.output!r}")
            elif r.output_kind is OutputKind.PRODUCER and r.output not in producer_ids:
                errors.append(f"Recipe {r.id!r} outputs unknown producer {r.output!r}")

        if self.config.tick_resolution <= 0:
            errors.append("EconomyConfig.tick_resolution must be positive")

        return errors


def _check_cost(label, base_cost, scaling, holding_ids) -> list[str]:
    errors = []
    if not base_cost:
        errors.append(f"{label} has no cost")
    for cur_id, amount in base_cost.items():
        if cur_id not in holding_ids:
            errors.append(f"{label} references unknown holding {cur_id!r} in cost")
        if amount < 0:
            errors.append(f"{label} has negative cost for {cur_id!r}")
    if scaling.growth_rate is not None and scaling.growth_rate < 1.0:
        errors.append(f"{label} has growth rate {scaling.growth_rate} < 1 (costs would shrink)")
    if scaling.cap is not None and scaling.cap <= 0:
        errors.append(f"{label} has non-positive cost cap {scaling.cap}")
    return errors
