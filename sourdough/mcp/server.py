"""MCP server wrapping EconomyEngine for interactive playtesting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mcp.server.fastmcp import FastMCP

from sourdough.definition import EconomyDefinition
from sourdough.engine import EconomyEngine
from sourdough.events import EconomyEvent, GainEvent
from sourdough.persistence import InMemoryBackend, PersistenceBackend
from sourdough.session import GameSession

# Maximum seconds per wait() call (24 hours)
_MAX_WAIT = 86400
# Maximum feeds per feed() call
_MAX_FEEDS = 1000


@dataclass
class _GameHolder:
    """Holds the active definition, engine and session."""

    definition: EconomyDefinition
    engine: EconomyEngine
    session: GameSession


def _make_holder(
    definition: EconomyDefinition, backend: PersistenceBackend | None = None
) -> _GameHolder:
    engine = EconomyEngine(definition)
    return _GameHolder(
        definition=definition,
        engine=engine,
        session=GameSession(engine, backend or InMemoryBackend()),
    )


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_economy_info(holder: _GameHolder) -> dict[str, Any]:
    defn = holder.definition
    return {
        "name": defn.config.name,
        "resources": [
            {"id": r.id, "display_name": r.display_name} for r in defn.resources
        ],
        "producers": [
            {
                "id": p.id,
                "display_name": p.display_name,
                "description": p.description,
                "effects": [
                    {"type": e.type.name, "target": e.target, "interval": e.interval}
                    for e in p.effects
                ],
            }
            for p in defn.producers
        ],
        "recipes": [
            {
                "id": r.id,
                "display_name": r.display_name,
                "description": r.description,
                "output": r.output or r.output_kind.name.lower(),
                "batch": r.batch,
            }
            for r in defn.recipes
        ],
    }


def _tool_get_economy_state(holder: _GameHolder) -> dict[str, Any]:
    state = holder.engine.get_state()
    return {
        "time_elapsed": state.time_elapsed,
        "points": state.points,
        "all_time_points": state.all_time_points,
        "starter_level": state.starter_level,
        "producers": dict(state.producers),
        "resources": dict(state.resources),
        "levels": dict(state.levels),
        "points_per_second": round(holder.engine.production_rate("points"), 4),
        "player_id": state.identity.player_id if state.identity else None,
    }


def _tool_get_purchases(holder: _GameHolder) -> dict[str, Any]:
    result = []
    for status in holder.engine.get_purchases():
        t = holder.engine.time_to_afford(status.id)
        result.append({
            "id": status.id,
            "display_name": status.display_name,
            "kind": status.kind,
            "owned": status.owned,
            "affordable": status.affordable,
            "current_cost": dict(status.current_cost),
            "time_to_afford": round(t, 2) if t is not None else None,
        })
    return {"purchases": result}


def _tool_feed(holder: _GameHolder, count: int = 1) -> dict[str, Any]:
    if count < 1:
        return {"error": "Count must be at least 1"}
    if count > _MAX_FEEDS:
        return {"error": f"Count cannot exceed {_MAX_FEEDS}"}

    total = sum(holder.engine.feed() for _ in range(count))
    return {
        "feeds": count,
        "points_earned": total,
        "new_balance": holder.engine.get_state().points,
    }


def _tool_purchase(holder: _GameHolder, kind_id: str) -> dict[str, Any]:
    if kind_id not in holder.definition.purchasable_ids():
        return {"error": f"Unknown producer or recipe: {kind_id!r}"}

    cost = holder.engine.current_cost(kind_id)
    if not holder.engine.purchase(kind_id):
        return {"success": False, "reason": "Cannot afford", "cost": cost}
    return {
        "success": True,
        "kind_id": kind_id,
        "cost_paid": cost,
        "state": _tool_get_economy_state(holder),
    }


def _tool_wait(holder: _GameHolder, seconds: float) -> dict[str, Any]:
    if seconds <= 0:
        return {"error": "Seconds must be positive"}
    if seconds > _MAX_WAIT:
        return {"error": f"Cannot wait more than {_MAX_WAIT} seconds (24h) per call"}

    gains: dict[str, int] = {}

    def _collect(event: EconomyEvent) -> None:
        if isinstance(event, GainEvent):
            gains[event.target] = gains.get(event.target, 0) + event.amount

    holder.engine.add_listener(_collect)
    try:
        fired = holder.engine.tick(seconds)
    finally:
        holder.engine.remove_listener(_collect)

    return {
        "waited": seconds,
        "effects_fired": fired,
        "gains": gains,
        "state": _tool_get_economy_state(holder),
    }


def _tool_snapshot(holder: _GameHolder) -> dict[str, Any]:
    return holder.engine.snapshot().to_record()


def _tool_restore(holder: _GameHolder, record: dict[str, Any]) -> dict[str, Any]:
    holder.engine.restore(record)
    return {"success": True, "state": _tool_get_economy_state(holder)}


async def _tool_save(holder: _GameHolder, username: str | None = None) -> dict[str, Any]:
    result = await holder.session.save(username)
    if result.success:
        return {"success": True, "player_id": result.player_id}
    return {"success": False, "reason": result.reason}


async def _tool_load(holder: _GameHolder, player_id: int | None = None) -> dict[str, Any]:
    result = await holder.session.load(player_id)
    if result.success:
        return {"success": True, "state": _tool_get_economy_state(holder)}
    return {"success": False, "reason": result.reason}


async def _tool_leaderboard(holder: _GameHolder, limit: int | None = None) -> dict[str, Any]:
    result = await holder.session.leaderboard(limit)
    if result.success:
        return {"entries": result.entries}
    return {"error": result.reason}


def _tool_new_game(holder: _GameHolder) -> dict[str, Any]:
    holder.engine.reset()
    return {"success": True, "message": "Economy reset to initial state"}


# ── Server factory ──────────────────────────────────────────────────


def create_server(
    definition: EconomyDefinition, backend: PersistenceBackend | None = None
) -> FastMCP:
    """Create an MCP server wrapping an EconomyEngine for the given definition."""
    holder = _make_holder(definition, backend)

    mcp = FastMCP(
        name=f"Sourdough: {definition.config.name}",
    )

    @mcp.tool()
    def get_economy_info() -> dict[str, Any]:
        """Get static overview: resources, producers with their effects and intervals, recipes."""
        return _tool_get_economy_info(holder)

    @mcp.tool()
    def get_economy_state() -> dict[str, Any]:
        """Get current counters: points, all-time points, starter level, producers, resources."""
        return _tool_get_economy_state(holder)

    @mcp.tool()
    def get_purchases() -> dict[str, Any]:
        """Get every producer and recipe with current cost, affordability and time-to-afford."""
        return _tool_get_purchases(holder)

    @mcp.tool()
    def feed(count: int = 1) -> dict[str, Any]:
        """Feed the starter N times (max 1000). Each feed earns starter-level points."""
        return _tool_feed(holder, count)

    @mcp.tool()
    def purchase(kind_id: str) -> dict[str, Any]:
        """Buy a producer or run a recipe. Returns success/failure with reason."""
        return _tool_purchase(holder, kind_id)

    @mcp.tool()
    def wait(seconds: float) -> dict[str, Any]:
        """Advance game time by the given seconds (max 86400), firing all production."""
        return _tool_wait(holder, seconds)

    @mcp.tool()
    def snapshot() -> dict[str, Any]:
        """Return the full economy state as a persistence record."""
        return _tool_snapshot(holder)

    @mcp.tool()
    def restore(record: dict[str, Any]) -> dict[str, Any]:
        """Replace the economy state from a record; malformed fields default to zero."""
        return _tool_restore(holder, record)

    @mcp.tool()
    async def save(username: str | None = None) -> dict[str, Any]:
        """Save the economy to the store; the first save assigns a player id."""
        return await _tool_save(holder, username)

    @mcp.tool()
    async def load(player_id: int | None = None) -> dict[str, Any]:
        """Load a saved economy by player id (defaults to this session's id)."""
        return await _tool_load(holder, player_id)

    @mcp.tool()
    async def leaderboard(limit: int | None = None) -> dict[str, Any]:
        """Ranked saves ordered by all-time points."""
        return await _tool_leaderboard(holder, limit)

    @mcp.tool()
    def new_game() -> dict[str, Any]:
        """Reset the economy to its initial state."""
        return _tool_new_game(holder)

    return mcp
