from typing import List, Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """
    One entry of a session history.
    """

    role: Literal["user", "assistant"] = Field(..., description="Author of the message")
    content: str = Field(..., description="Message text")


class Session(BaseModel):
    """
    Conversation state kept in memory for one session id.
    """

    session_id: str = Field(..., description="Opaque server-generated session id")
    history: List[ChatMessage] = Field(
        default_factory=list, description="Chronological user/assistant messages"
    )
    system_prompt: str = Field(..., min_length=1, description="System instruction")
    temperature: float = Field(..., ge=0.0, le=2.0, description="Sampling temperature")
    created_at: float = Field(..., description="Creation timestamp (epoch seconds)")
    last_activity: float = Field(..., description="Last use timestamp (epoch seconds)")

    @property
    def message_count(self) -> int:
        return len(self.history)


__all__ = ["ChatMessage", "Session"]
