from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sourdough.resource import POINTS

if TYPE_CHECKING:
    from sourdough.definition import EconomyDefinition


@dataclass(frozen=True)
class PlayerIdentity:
    """Persistence identity, assigned by the first successful save."""

    player_id: int
    username: str = ""


class EconomyState:
    """Mutable container holding every counter of one player's economy."""

    def __init__(self, definition: EconomyDefinition) -> None:
        self.points: int = 0
        self.all_time_points: int = 0
        self.starter_level: int = 1
        self.producers: dict[str, int] = {p.id: 0 for p in definition.producers}
        self.resources: dict[str, int] = {r.id: 0 for r in definition.resources}
        self.levels: dict[str, int] = {k: 0 for k in definition.level_keys()}
        self.clock_ms: int = 0
        self.identity: PlayerIdentity | None = None

    @property
    def time_elapsed(self) -> float:
        return self.clock_ms / 1000.0

    def producer_count(self, id: str) -> int:
        return self.producers.get(id, 0)

    def resource_count(self, id: str) -> int:
        return self.resources.get(id, 0)

    def level(self, id: str) -> int:
        return self.levels.get(id, 0)

    def holding(self, id: str) -> int:
        """Amount held of *id*: points, a tier resource, or a producer count."""
        if id == POINTS:
            return self.points
        if id in self.resources:
            return self.resources[id]
        return self.producers.get(id, 0)
