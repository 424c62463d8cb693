"""
In-memory session store.

The store owns the only process-wide mutable state of the service: the
mapping from session id to Session. Every access to that mapping happens
under a short threading lock that is never held across an ``await``; callers
always receive deep copies, so stored sessions can only change through the
methods below.

Each session also owns an ``asyncio.Lock`` (see ``lock_for``) that the turn
executor holds for the whole read-history / call-backend / append-pair
sequence, so overlapping turns on one session are serialized while other
sessions proceed untouched.
"""

from __future__ import annotations

import asyncio
import math
import threading
import time
import uuid
from typing import Any, Callable, Dict, Optional, Set

from chatsession.logging_config import logger
from chatsession.models import ChatMessage, Session

from .exceptions import InvalidArgument, SessionNotFound


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# Marks an optional argument the caller did not supply (None is a value).
UNSET: Any = _Unset()

MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0


def _new_session_id() -> str:
    return str(uuid.uuid4())


def validate_session_id(session_id: Any) -> str:
    if not isinstance(session_id, str) or not session_id:
        raise InvalidArgument("sessionId", "sessionId is required")
    return session_id


def validate_message(message: Any) -> str:
    if not isinstance(message, str) or not message.strip():
        raise InvalidArgument("message", "message must be a non-empty string")
    return message


def validate_system_prompt(system_prompt: Any, default: str) -> str:
    """
    Return the prompt to store; blank prompts fall back to ``default``.
    """
    if not isinstance(system_prompt, str):
        raise InvalidArgument("systemPrompt", "systemPrompt must be a string")
    return system_prompt.strip() or default


def validate_temperature(temperature: Any) -> float:
    # bool is an int subclass but never a valid temperature.
    if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
        raise InvalidArgument(
            "temperature", "temperature must be a number between 0 and 2"
        )
    try:
        value = float(temperature)
    except OverflowError:
        raise InvalidArgument(
            "temperature", "temperature must be a number between 0 and 2"
        ) from None
    if math.isnan(value) or not MIN_TEMPERATURE <= value <= MAX_TEMPERATURE:
        raise InvalidArgument(
            "temperature", "temperature must be a number between 0 and 2"
        )
    return value


class SessionStore:
    def __init__(
        self,
        *,
        default_system_prompt: str,
        default_temperature: float = 0.5,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = _new_session_id,
    ) -> None:
        if not default_system_prompt.strip():
            raise ValueError("default_system_prompt must not be blank")
        self.default_system_prompt = default_system_prompt
        self.default_temperature = validate_temperature(default_temperature)
        self._clock = clock
        self._id_factory = id_factory

        self._sessions: Dict[str, Session] = {}
        self._turn_locks: Dict[str, asyncio.Lock] = {}
        # Deleted and expired ids; create() never hands them out again.
        self._retired: Set[str] = set()
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    # ---------- lifecycle ----------
    def create(self) -> str:
        now = self._clock()
        with self._lock:
            session_id = self._id_factory()
            while session_id in self._sessions or session_id in self._retired:
                session_id = self._id_factory()
            self._sessions[session_id] = Session(
                session_id=session_id,
                system_prompt=self.default_system_prompt,
                temperature=self.default_temperature,
                created_at=now,
                last_activity=now,
            )
            self._turn_locks[session_id] = asyncio.Lock()
        logger.info("Session created: %s", session_id)
        return session_id

    def delete(self, session_id: str) -> None:
        with self._lock:
            if session_id not in self._sessions:
                raise SessionNotFound(session_id)
            del self._sessions[session_id]
            self._turn_locks.pop(session_id, None)
            self._retired.add(session_id)
        logger.info("Session deleted: %s", session_id)

    def discard(self, session_id: str, *, stale_before: Optional[float] = None) -> bool:
        """
        Remove a session if present; returns True if it was removed.

        With ``stale_before`` set, a session whose last activity is at or
        after that instant is kept, so a session refreshed after an expiry
        scan is not evicted by it.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            if stale_before is not None and session.last_activity >= stale_before:
                return False
            del self._sessions[session_id]
            self._turn_locks.pop(session_id, None)
            self._retired.add(session_id)
        return True

    # ---------- lookups ----------
    def get(self, session_id: str) -> Session:
        """
        Lookup-for-use: returns a copy of the session and refreshes its
        last activity.
        """
        now = self._clock()
        with self._lock:
            session = self._require(session_id)
            session.last_activity = now
            return session.model_copy(deep=True)

    def peek(self, session_id: str) -> Optional[Session]:
        """
        Existence probe: never refreshes activity and never creates.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            return session.model_copy(deep=True) if session is not None else None

    def lock_for(self, session_id: str) -> asyncio.Lock:
        with self._lock:
            lock = self._turn_locks.get(session_id)
        if lock is None:
            raise SessionNotFound(session_id)
        return lock

    def is_busy(self, session_id: str) -> bool:
        with self._lock:
            lock = self._turn_locks.get(session_id)
        return lock is not None and lock.locked()

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def list_expired(self, now: float, threshold_minutes: float) -> Set[str]:
        threshold_seconds = threshold_minutes * 60.0
        with self._lock:
            return {
                session_id
                for session_id, session in self._sessions.items()
                if now - session.last_activity > threshold_seconds
            }

    # ---------- mutations ----------
    def update(
        self,
        session_id: str,
        *,
        system_prompt: Any = UNSET,
        temperature: Any = UNSET,
    ) -> Session:
        """
        Partially update a session's configuration.

        Both values are validated before either is applied, so a rejected
        update leaves the session exactly as it was.
        """
        new_prompt = (
            UNSET
            if system_prompt is UNSET
            else validate_system_prompt(system_prompt, self.default_system_prompt)
        )
        new_temperature = UNSET if temperature is UNSET else validate_temperature(temperature)

        now = self._clock()
        with self._lock:
            session = self._require(session_id)
            if new_prompt is not UNSET:
                session.system_prompt = new_prompt
            if new_temperature is not UNSET:
                session.temperature = new_temperature
            session.last_activity = now
            return session.model_copy(deep=True)

    def clear_history(self, session_id: str) -> None:
        now = self._clock()
        with self._lock:
            session = self._require(session_id)
            session.history = []
            session.last_activity = now

    def append_turn(self, session_id: str, user_message: str, reply: str) -> Session:
        now = self._clock()
        with self._lock:
            session = self._require(session_id)
            session.history.extend(
                [
                    ChatMessage(role="user", content=user_message),
                    ChatMessage(role="assistant", content=reply),
                ]
            )
            session.last_activity = now
            return session.model_copy(deep=True)

    def _require(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session


__all__ = [
    "SessionStore",
    "UNSET",
    "validate_message",
    "validate_session_id",
    "validate_system_prompt",
    "validate_temperature",
]
