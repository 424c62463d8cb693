from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from chatsession.logging_config import logger

from .assembler import assemble
from .exceptions import BackendError
from .store import (
    UNSET,
    SessionStore,
    validate_message,
    validate_session_id,
    validate_system_prompt,
    validate_temperature,
)

if TYPE_CHECKING:
    from chatsession.upstream import ModelBackend


@dataclass(frozen=True)
class TurnResult:
    session_id: str
    reply: str
    timestamp: float


class TurnExecutor:
    """
    Runs one conversational turn against a session.

    The per-session lock is held from history read to pair append, so turns
    on the same session never interleave; the backend call holds no other
    lock.
    """

    def __init__(self, store: SessionStore, backend: ModelBackend) -> None:
        self.store = store
        self.backend = backend

    async def run_turn(
        self,
        session_id: str,
        message: Any,
        *,
        system_prompt: Any = UNSET,
        temperature: Any = UNSET,
    ) -> TurnResult:
        # Fail fast on bad input before touching the session; overrides are
        # checked first, then the session id, then the message.
        overrides = {}
        if system_prompt is not UNSET:
            overrides["system_prompt"] = validate_system_prompt(
                system_prompt, self.store.default_system_prompt
            )
        if temperature is not UNSET:
            overrides["temperature"] = validate_temperature(temperature)
        session_id = validate_session_id(session_id)
        message = validate_message(message)

        async with self.store.lock_for(session_id):
            session = self.store.get(session_id)
            if overrides:
                # Used for this turn now, stored only once the backend succeeds.
                session = session.model_copy(update=overrides)

            logger.info(
                "Turn received for session %s: message_len=%d history=%d temperature=%s prompt=%.50r",
                session_id,
                len(message),
                session.message_count,
                session.temperature,
                session.system_prompt,
            )
            prompt = assemble(session, message)
            try:
                reply = await self.backend.complete(prompt, session.temperature)
            except BackendError:
                logger.warning("Backend call failed for session %s", session_id)
                raise

            if overrides:
                self.store.update(session_id, **overrides)
            self.store.append_turn(session_id, message, reply)

        return TurnResult(session_id=session_id, reply=reply, timestamp=self.store.now())


__all__ = ["TurnExecutor", "TurnResult"]
