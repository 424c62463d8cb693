"""
Session lifecycle and conversation assembly.
"""

from .assembler import assemble
from .exceptions import BackendError, InvalidArgument, SessionError, SessionNotFound
from .executor import TurnExecutor, TurnResult
from .reaper import ExpiryReaper
from .service import ChatSessionService, ServiceStatus, SessionProbe
from .store import UNSET, SessionStore

__all__ = [
    "assemble",
    "BackendError",
    "ChatSessionService",
    "ExpiryReaper",
    "InvalidArgument",
    "ServiceStatus",
    "SessionError",
    "SessionNotFound",
    "SessionProbe",
    "SessionStore",
    "TurnExecutor",
    "TurnResult",
    "UNSET",
]
