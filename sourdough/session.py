from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from sourdough.engine import EconomyEngine
from sourdough.identity import IdentityStore
from sourdough.persistence import PersistenceBackend, PersistenceUnavailable
from sourdough.snapshot import RANKING_METRIC

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a save attempt."""

    success: bool
    player_id: int | None = None
    reason: str = ""


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a load-and-restore attempt."""

    success: bool
    player_id: int | None = None
    reason: str = ""


@dataclass(frozen=True)
class LeaderboardResult:
    success: bool
    entries: list[dict[str, Any]] = field(default_factory=list)
    reason: str = ""


class GameSession:
    """Connects one engine to its persistence and identity collaborators.

    Save and load are serialized by an asyncio lock: a load that arrives
    while a save is in flight restores only after that save has captured its
    snapshot. Neither holds the engine while awaiting the backend, so feeds
    and ticks keep applying to live state during network I/O.
    """

    def __init__(
        self,
        engine: EconomyEngine,
        backend: PersistenceBackend,
        identity_store: IdentityStore | None = None,
    ) -> None:
        self.engine = engine
        self.backend = backend
        self.identity_store = identity_store
        self._io_lock = asyncio.Lock()

    async def save(self, username: str | None = None) -> SaveResult:
        """Persist a snapshot of the current state; assigns identity on first success."""
        async with self._io_lock:
            record = self.engine.snapshot().to_record()
            if username is not None:
                record["username"] = username
            try:
                player_id = await self.backend.save(record)
            except PersistenceUnavailable as exc:
                logger.warning("Save failed: %s", exc)
                return SaveResult(success=False, reason=f"Could not save game: {exc}")

            try:
                self.engine.assign_identity(player_id, record["username"])
            except ValueError as exc:
                logger.warning("Save stored under unexpected id: %s", exc)
                return SaveResult(success=False, player_id=player_id, reason=str(exc))
            self._remember(player_id)
            logger.info("Saved player %d (%s points all time)", player_id, record[RANKING_METRIC])
            return SaveResult(success=True, player_id=player_id)

    async def load(self, player_id: int | None = None) -> LoadResult:
        """Fetch a saved record and restore it; state is untouched on failure.

        Without *player_id*, the session identity or the device's stored id
        is used. A session that already has an identity only loads its own
        record.
        """
        if player_id is None:
            player_id = self._known_id()
        if player_id is None:
            return LoadResult(success=False, reason="No player id to load")

        async with self._io_lock:
            identity = self.engine.state.identity
            if identity is not None and identity.player_id != player_id:
                logger.warning(
                    "Refusing to load player %d into session of player %d",
                    player_id,
                    identity.player_id,
                )
                return LoadResult(
                    success=False,
                    player_id=player_id,
                    reason=f"Session belongs to player {identity.player_id}; "
                    f"cannot load player {player_id}",
                )
            try:
                record = await self.backend.load(player_id)
            except PersistenceUnavailable as exc:
                logger.warning("Load of player %d failed: %s", player_id, exc)
                return LoadResult(
                    success=False, player_id=player_id, reason=f"Could not load game: {exc}"
                )
            if record is None:
                return LoadResult(
                    success=False,
                    player_id=player_id,
                    reason=f"No saved game for player {player_id}",
                )

            self.engine.restore(record)
            if self.engine.state.identity is None:
                username = record.get("username") if isinstance(record, dict) else ""
                self.engine.assign_identity(
                    player_id, username if isinstance(username, str) else ""
                )
            self._remember(self.engine.state.identity.player_id)
            return LoadResult(success=True, player_id=player_id)

    async def leaderboard(self, limit: int | None = None) -> LeaderboardResult:
        if limit is None:
            limit = self.engine.definition.config.leaderboard_limit
        try:
            entries = await self.backend.ranked_list(RANKING_METRIC, limit)
        except PersistenceUnavailable as exc:
            logger.warning("Leaderboard unavailable: %s", exc)
            return LeaderboardResult(success=False, reason=f"Could not fetch leaderboard: {exc}")
        return LeaderboardResult(success=True, entries=entries)

    def _known_id(self) -> int | None:
        identity = self.engine.state.identity
        if identity is not None:
            return identity.player_id
        if self.identity_store is not None:
            return self.identity_store.get_stored_id()
        return None

    def _remember(self, player_id: int) -> None:
        if self.identity_store is None:
            return
        try:
            self.identity_store.set_stored_id(player_id)
        except OSError as exc:
            logger.warning("Could not store player id %d on this device: %s", player_id, exc)
