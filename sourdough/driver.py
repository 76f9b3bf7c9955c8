from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from sourdough.engine import EconomyEngine
from sourdough.session import GameSession, SaveResult

logger = logging.getLogger(__name__)


class RealtimeDriver:
    """Feeds wall-clock time into an engine's virtual clock.

    Elapsed time is measured with a monotonic clock and converted to whole
    milliseconds, carrying the sub-millisecond remainder to the next pump.
    A process that was suspended catches up on its next pump because the
    scheduler replays every interval that elapsed meanwhile.
    """

    def __init__(
        self,
        engine: EconomyEngine,
        session: GameSession | None = None,
        clock: Callable[[], float] = time.monotonic,
        autosave_interval: float | None = None,
    ) -> None:
        self.engine = engine
        self.session = session
        self.clock = clock
        if autosave_interval is None:
            autosave_interval = engine.definition.config.autosave_interval
        self.autosave_interval = autosave_interval
        self._last: float | None = None
        self._last_save: float | None = None
        self._save_task: asyncio.Task[SaveResult] | None = None

    def pump(self) -> int:
        """Advance the engine by the time since the previous pump. Returns firings."""
        now = self.clock()
        if self._last is None:
            self._last = now
            return 0
        elapsed_ms = int((now - self._last) * 1000)
        if elapsed_ms <= 0:
            return 0
        self._last += elapsed_ms / 1000.0
        return self.engine.advance_ms(elapsed_ms)

    def autosave_due(self) -> bool:
        if self.session is None or not self.autosave_interval:
            return False
        if self._save_task is not None and not self._save_task.done():
            return False
        now = self.clock()
        if self._last_save is None:
            self._last_save = now
            return False
        return now - self._last_save >= self.autosave_interval

    async def run(self, stop: asyncio.Event, resolution: float | None = None) -> None:
        """Pump until *stop* is set. Autosaves run as background tasks."""
        if resolution is None:
            resolution = self.engine.definition.config.tick_resolution
        self.pump()
        while not stop.is_set():
            self.pump()
            if self.autosave_due():
                self._last_save = self.clock()
                self._save_task = asyncio.create_task(self.session.save())
                self._save_task.add_done_callback(_log_save)
            try:
                await asyncio.wait_for(stop.wait(), timeout=resolution)
            except asyncio.TimeoutError:
                pass
        self.pump()
        if self._save_task is not None and not self._save_task.done():
            await self._save_task


def _log_save(task: asyncio.Task[SaveResult]) -> None:
    if task.cancelled():
        return
    result = task.result()
    if result.success:
        logger.info("Autosaved player %d", result.player_id)
    else:
        logger.warning("Autosave failed: %s", result.reason)
