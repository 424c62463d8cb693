from .session import ChatMessage, Session

__all__ = [
    "ChatMessage",
    "Session",
]
