from __future__ import annotations

from typing import Optional


class SessionError(Exception):
    """Base class for errors raised by the session core."""


class SessionNotFound(SessionError):
    """Raised when a session id is unknown or has expired."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session '{session_id}' not found or expired")


class InvalidArgument(SessionError):
    """Raised when a message or configuration value fails validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class BackendError(SessionError):
    """
    Raised when the model backend call fails or returns malformed output.

    status_code is the upstream HTTP status when one was received.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        text: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.text = text


__all__ = ["SessionError", "SessionNotFound", "InvalidArgument", "BackendError"]
