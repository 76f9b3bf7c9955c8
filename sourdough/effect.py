from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable

from sourdough.resource import POINTS

if TYPE_CHECKING:
    from sourdough.state import EconomyState


class EffectType(Enum):
    DIRECT = auto()
    META = auto()
    LEVEL = auto()
    BONUS = auto()
    CUSTOM = auto()


@dataclass
class StateDelta:
    """Counter changes produced by one firing of a production effect."""

    points: int = 0
    resources: dict[str, int] = field(default_factory=dict)
    producers: dict[str, int] = field(default_factory=dict)
    levels: dict[str, int] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (
            self.points
            or any(self.resources.values())
            or any(self.producers.values())
            or any(self.levels.values())
        )


@dataclass
class EffectDef:
    """A recurring production effect owned by a producer.

    Fires once every *interval* seconds of virtual time; the delta it yields
    scales with the owning producer's count at the moment it fires.
    """

    type: EffectType
    target: str
    interval: float
    per_unit: int = 1
    level_key: str = ""
    fn: Callable[[EconomyState, int], StateDelta] | None = None

    @property
    def interval_ms(self) -> int:
        return int(round(self.interval * 1000))

    def compute(self, state: EconomyState, count: int) -> StateDelta:
        """Return the delta for one firing with *count* owned units."""
        delta = StateDelta()
        if count <= 0:
            return delta
        amount = count * self.per_unit

        if self.type is EffectType.DIRECT:
            if self.target == POINTS:
                delta.points = amount
            else:
                delta.resources[self.target] = amount
        elif self.type is EffectType.META:
            delta.producers[self.target] = amount
        elif self.type is EffectType.LEVEL:
            delta.levels[self.target] = amount
        elif self.type is EffectType.BONUS:
            delta.points = amount * (1 + state.level(self.level_key))
        elif self.type is EffectType.CUSTOM and self.fn is not None:
            delta = self.fn(state, count)
        return delta


class Effect:
    """Convenience constructors for the production patterns."""

    @staticmethod
    def direct(target: str, interval: float, per_unit: int = 1) -> EffectDef:
        """Each unit adds *per_unit* of a resource (or points) per interval."""
        return EffectDef(EffectType.DIRECT, target, interval, per_unit)

    @staticmethod
    def meta(producer: str, interval: float, per_unit: int = 1) -> EffectDef:
        """Each unit adds *per_unit* lower-tier producers per interval, free of cost."""
        return EffectDef(EffectType.META, producer, interval, per_unit)

    @staticmethod
    def level(counter: str, interval: float, per_unit: int = 1) -> EffectDef:
        """Each unit raises a leveling counter by *per_unit* per interval."""
        return EffectDef(EffectType.LEVEL, counter, interval, per_unit)

    @staticmethod
    def bonus(counter: str, interval: float, per_unit: int = 1) -> EffectDef:
        """Each unit grants per_unit * (1 + level) points per interval."""
        return EffectDef(EffectType.BONUS, POINTS, interval, per_unit, level_key=counter)

    @staticmethod
    def custom(
        fn: Callable[[EconomyState, int], StateDelta],
        interval: float,
        target: str = "",
    ) -> EffectDef:
        return EffectDef(EffectType.CUSTOM, target, interval, fn=fn)
