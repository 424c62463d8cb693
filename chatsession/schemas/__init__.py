from .session import (
    ChatRequest,
    ChatResponse,
    ConfigUpdateRequest,
    ConfigUpdateResponse,
    CreateSessionResponse,
    MessageOut,
    SessionActionResponse,
    SessionExistsResponse,
    SessionHistoryResponse,
    StatusResponse,
    epoch_to_datetime,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ConfigUpdateRequest",
    "ConfigUpdateResponse",
    "CreateSessionResponse",
    "MessageOut",
    "SessionActionResponse",
    "SessionExistsResponse",
    "SessionHistoryResponse",
    "StatusResponse",
    "epoch_to_datetime",
]
