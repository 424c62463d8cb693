from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from chatsession.models import Session

from .executor import TurnExecutor, TurnResult
from .store import UNSET, SessionStore


@dataclass(frozen=True)
class SessionProbe:
    exists: bool
    session_id: str
    created_at: Optional[float] = None
    last_activity: Optional[float] = None
    message_count: Optional[int] = None


@dataclass(frozen=True)
class ServiceStatus:
    active_sessions: int
    uptime: float


class ChatSessionService:
    """
    Operations offered to the HTTP layer.

    Configuration updates and history clears take the session's turn lock,
    so they are ordered with respect to whole turns rather than landing in
    the middle of one.
    """

    def __init__(
        self,
        store: SessionStore,
        executor: TurnExecutor,
        *,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.executor = executor
        self._monotonic = monotonic
        self._started_at = monotonic()

    def create_session(self) -> str:
        return self.store.create()

    def session_exists(self, session_id: str) -> SessionProbe:
        session = self.store.peek(session_id)
        if session is None:
            return SessionProbe(exists=False, session_id=session_id)
        return SessionProbe(
            exists=True,
            session_id=session_id,
            created_at=session.created_at,
            last_activity=session.last_activity,
            message_count=session.message_count,
        )

    def get_history(self, session_id: str) -> Session:
        return self.store.get(session_id)

    async def run_turn(
        self,
        session_id: str,
        message: Any,
        *,
        system_prompt: Any = UNSET,
        temperature: Any = UNSET,
    ) -> TurnResult:
        return await self.executor.run_turn(
            session_id, message, system_prompt=system_prompt, temperature=temperature
        )

    async def clear_history(self, session_id: str) -> None:
        async with self.store.lock_for(session_id):
            self.store.clear_history(session_id)

    async def update_config(
        self,
        session_id: str,
        *,
        system_prompt: Any = UNSET,
        temperature: Any = UNSET,
    ) -> Session:
        async with self.store.lock_for(session_id):
            return self.store.update(
                session_id, system_prompt=system_prompt, temperature=temperature
            )

    def delete_session(self, session_id: str) -> None:
        self.store.delete(session_id)

    def status(self) -> ServiceStatus:
        return ServiceStatus(
            active_sessions=self.store.count(),
            uptime=self._monotonic() - self._started_at,
        )


__all__ = ["ChatSessionService", "ServiceStatus", "SessionProbe"]
