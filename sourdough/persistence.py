"""Persistence collaborators: save/load snapshot records and rank them.

Backends are async because the real service sits across the network. The
two in-process backends here serve tests, the CLI and local play.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from sourdough.snapshot import RANKING_METRIC, coerce_count

logger = logging.getLogger(__name__)


class PersistenceUnavailable(Exception):
    """The persistence service could not complete a save or load."""


class PersistenceBackend(ABC):
    """Contract for a remote store of snapshot records keyed by player id."""

    @abstractmethod
    async def save(self, record: dict[str, Any]) -> int:
        """Store *record*; returns the player id it is stored under."""

    @abstractmethod
    async def load(self, player_id: int) -> dict[str, Any] | None:
        """Return the stored record, or None when the id is unknown."""

    @abstractmethod
    async def ranked_list(
        self, metric: str = RANKING_METRIC, limit: int = 10
    ) -> list[dict[str, Any]]:
        """Records ordered by *metric* descending, at most *limit* of them."""


def rank_records(
    records: list[dict[str, Any]], metric: str, limit: int
) -> list[dict[str, Any]]:
    """Sort by the ranking metric, descending; ties keep insertion order."""
    if metric != RANKING_METRIC:
        raise ValueError(f"Unsupported ranking metric: {metric!r}. Expected {RANKING_METRIC!r}")
    if limit <= 0:
        return []
    ranked = sorted(records, key=lambda r: coerce_count(r.get(metric)), reverse=True)
    return [copy.deepcopy(r) for r in ranked[:limit]]


def _requested_id(record: dict[str, Any]) -> int | None:
    pid = record.get("playerId")
    if isinstance(pid, bool) or not isinstance(pid, int):
        return None
    return pid


class InMemoryBackend(PersistenceBackend):
    """Dict-backed store. Set ``fail_with`` to simulate an outage."""

    def __init__(self) -> None:
        self._records: dict[int, dict[str, Any]] = {}
        self._next_id = 1
        self.fail_with: str | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise PersistenceUnavailable(self.fail_with)

    async def save(self, record: dict[str, Any]) -> int:
        self._check()
        pid = _requested_id(record)
        if pid is None:
            pid = self._next_id
        self._next_id = max(self._next_id, pid + 1)
        stored = copy.deepcopy(record)
        stored["playerId"] = pid
        self._records[pid] = stored
        return pid

    async def load(self, player_id: int) -> dict[str, Any] | None:
        self._check()
        record = self._records.get(player_id)
        return copy.deepcopy(record) if record is not None else None

    async def ranked_list(
        self, metric: str = RANKING_METRIC, limit: int = 10
    ) -> list[dict[str, Any]]:
        self._check()
        return rank_records(list(self._records.values()), metric, limit)


class JsonFileBackend(PersistenceBackend):
    """Stores every record in one JSON document on disk.

    Layout: ``{"nextId": int, "records": {"<id>": record, ...}}``. File I/O
    runs in a worker thread so the event loop keeps ticking meanwhile.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"nextId": 1, "records": {}}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceUnavailable(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("records"), dict):
            raise PersistenceUnavailable(f"Unrecognized store layout in {self.path}")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp.replace(self.path)
        except OSError as exc:
            raise PersistenceUnavailable(f"Cannot write {self.path}: {exc}") from exc

    def _save_sync(self, record: dict[str, Any]) -> int:
        data = self._read()
        next_id = coerce_count(data.get("nextId"), default=1, minimum=1)
        pid = _requested_id(record)
        if pid is None:
            pid = next_id
        stored = dict(record)
        stored["playerId"] = pid
        data["records"][str(pid)] = stored
        data["nextId"] = max(next_id, pid + 1)
        self._write(data)
        logger.debug("Saved player %d to %s", pid, self.path)
        return pid

    async def save(self, record: dict[str, Any]) -> int:
        return await asyncio.to_thread(self._save_sync, record)

    async def load(self, player_id: int) -> dict[str, Any] | None:
        data = await asyncio.to_thread(self._read)
        return data["records"].get(str(player_id))

    async def ranked_list(
        self, metric: str = RANKING_METRIC, limit: int = 10
    ) -> list[dict[str, Any]]:
        data = await asyncio.to_thread(self._read)
        records = [r for r in data["records"].values() if isinstance(r, dict)]
        return rank_records(records, metric, limit)
