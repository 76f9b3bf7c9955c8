from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class IdentityStore(ABC):
    """Device-local storage of the opaque player id."""

    @abstractmethod
    def get_stored_id(self) -> int | None: ...

    @abstractmethod
    def set_stored_id(self, player_id: int) -> None: ...


class MemoryIdentityStore(IdentityStore):
    def __init__(self, player_id: int | None = None) -> None:
        self._player_id = player_id

    def get_stored_id(self) -> int | None:
        return self._player_id

    def set_stored_id(self, player_id: int) -> None:
        self._player_id = player_id


class FileIdentityStore(IdentityStore):
    """Keeps the id in a small JSON file, e.g. ``~/.sourdough/identity.json``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def get_stored_id(self) -> int | None:
        if not self.path.exists():
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable identity file %s", self.path)
            return None
        pid = data.get("playerId") if isinstance(data, dict) else None
        if isinstance(pid, bool) or not isinstance(pid, int):
            return None
        return pid

    def set_stored_id(self, player_id: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"playerId": player_id}, f)
