from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def epoch_to_datetime(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Request bodies are loosely typed on purpose: wrong types must reach the
# session core and come back as 400 bad_request, not as a 422.
class ChatRequest(CamelModel):
    session_id: Any = Field(default=None, description="Session id from /api/session/new")
    message: Any = Field(default=None, description="User message, must not be blank")
    system_prompt: Any = Field(
        default=None, description="Optional system prompt; persists for later turns"
    )
    temperature: Any = Field(
        default=None, description="Optional temperature in [0, 2]; persists for later turns"
    )


class ConfigUpdateRequest(CamelModel):
    system_prompt: Any = Field(default=None, description="New system prompt")
    temperature: Any = Field(default=None, description="New temperature in [0, 2]")


class MessageOut(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class CreateSessionResponse(CamelModel):
    session_id: str
    message: str = "Session created successfully"


class SessionExistsResponse(CamelModel):
    exists: bool
    session_id: str
    created_at: Optional[datetime] = None
    last_activity: Optional[datetime] = None
    message_count: Optional[int] = None


class ChatResponse(CamelModel):
    session_id: str
    response: str
    timestamp: datetime


class SessionHistoryResponse(CamelModel):
    session_id: str
    message_count: int
    messages: List[MessageOut] = Field(default_factory=list)
    system_prompt: str
    temperature: float
    created_at: datetime
    last_activity: datetime


class ConfigUpdateResponse(CamelModel):
    message: str = "Configuration updated successfully"
    session_id: str
    system_prompt: str
    temperature: float


class SessionActionResponse(CamelModel):
    message: str
    session_id: str


class StatusResponse(CamelModel):
    status: str = "online"
    active_sessions: int
    uptime: float


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
