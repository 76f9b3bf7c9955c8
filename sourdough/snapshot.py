"""Immutable economy snapshots and the external record format.

A record is the plain ``dict`` handed to persistence collaborators. Records
arriving from outside are untrusted: every field is coerced on its own and
falls back to its zero value, so a partially shaped record never aborts a
restore.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

from sourdough.state import EconomyState, PlayerIdentity

if TYPE_CHECKING:
    from sourdough.definition import EconomyDefinition

logger = logging.getLogger(__name__)

RANKING_METRIC = "allTimePoints"


@dataclass(frozen=True)
class EconomySnapshot:
    """Fully-qualified, read-only copy of an EconomyState at one instant."""

    points: int
    all_time_points: int
    starter_level: int
    producers: Mapping[str, int]
    resources: Mapping[str, int]
    levels: Mapping[str, int]
    clock_ms: int
    identity: PlayerIdentity | None = None

    @classmethod
    def from_state(cls, state: EconomyState) -> EconomySnapshot:
        return cls(
            points=state.points,
            all_time_points=state.all_time_points,
            starter_level=state.starter_level,
            producers=MappingProxyType(dict(state.producers)),
            resources=MappingProxyType(dict(state.resources)),
            levels=MappingProxyType(dict(state.levels)),
            clock_ms=state.clock_ms,
            identity=state.identity,
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "playerId": self.identity.player_id if self.identity else None,
            "username": self.identity.username if self.identity else "",
            "points": self.points,
            RANKING_METRIC: self.all_time_points,
            "starterLevel": self.starter_level,
            "producers": dict(self.producers),
            "tierResources": dict(self.resources),
            "levels": dict(self.levels),
            "clockMs": self.clock_ms,
        }

    @classmethod
    def from_record(
        cls, record: Any, definition: EconomyDefinition
    ) -> EconomySnapshot:
        """Build a snapshot from an untrusted record, defaulting bad fields."""
        if not isinstance(record, Mapping):
            logger.debug("Record of type %s is not a mapping; using defaults", type(record).__name__)
            record = {}

        points = coerce_count(record.get("points"))
        all_time = coerce_count(record.get(RANKING_METRIC))
        return cls(
            points=points,
            all_time_points=max(all_time, points),
            starter_level=coerce_count(record.get("starterLevel"), default=1, minimum=1),
            producers=_coerce_counts(
                record.get("producers"), [p.id for p in definition.producers]
            ),
            resources=_coerce_counts(
                record.get("tierResources"), [r.id for r in definition.resources]
            ),
            levels=_coerce_counts(record.get("levels"), definition.level_keys()),
            clock_ms=coerce_count(record.get("clockMs")),
            identity=_coerce_identity(record.get("playerId"), record.get("username")),
        )


def coerce_count(value: Any, default: int = 0, minimum: int = 0) -> int:
    """Integer counter from an untrusted value; *default* when unusable."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        if value is not None:
            logger.debug("Non-numeric value %r replaced by %d", value, default)
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    count = int(value)
    if count < minimum:
        logger.debug("Value %r below minimum %d replaced by %d", value, minimum, default)
        return default
    return count


def _coerce_counts(value: Any, keys: list[str]) -> Mapping[str, int]:
    source = value if isinstance(value, Mapping) else {}
    return MappingProxyType({k: coerce_count(source.get(k)) for k in keys})


def _coerce_identity(player_id: Any, username: Any) -> PlayerIdentity | None:
    if isinstance(player_id, bool) or not isinstance(player_id, int):
        return None
    return PlayerIdentity(player_id, username if isinstance(username, str) else "")
