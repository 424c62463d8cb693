from __future__ import annotations

import asyncio
from typing import Optional

from chatsession.logging_config import logger

from .store import SessionStore


class ExpiryReaper:
    """Periodic task evicting sessions idle for longer than a threshold."""

    def __init__(
        self,
        store: SessionStore,
        *,
        inactivity_minutes: float = 30.0,
        interval_seconds: float = 300.0,
    ) -> None:
        self.store = store
        self.inactivity_minutes = inactivity_minutes
        self.interval_seconds = interval_seconds

        self._stop_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._sweep_loop(), name="session-expiry-reaper")

    async def stop(self) -> None:
        if self._task is None:
            return
        if self._stop_event is not None:
            self._stop_event.set()
        await self._task
        self._task = None

    def sweep(self) -> int:
        """
        Evict every expired session once; returns the number removed.

        Sessions with a turn in flight are left for the next pass.
        """
        now = self.store.now()
        stale_before = now - self.inactivity_minutes * 60.0
        removed = 0
        for session_id in self.store.list_expired(now, self.inactivity_minutes):
            if self.store.is_busy(session_id):
                continue
            if self.store.discard(session_id, stale_before=stale_before):
                removed += 1
                logger.info("Session %s removed for inactivity", session_id)
        return removed

    async def _sweep_loop(self) -> None:
        assert self._stop_event is not None
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass
            if self._stop_event.is_set():
                break
            try:
                removed = self.sweep()
                if removed:
                    logger.debug("Expiry sweep removed %d sessions", removed)
            except Exception:
                logger.exception("Unexpected error while sweeping expired sessions")


__all__ = ["ExpiryReaper"]
