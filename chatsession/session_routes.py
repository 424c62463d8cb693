from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from chatsession.deps import get_session_service
from chatsession.errors import bad_gateway, bad_request, not_found
from chatsession.schemas import (
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
from chatsession.sessions import (
    UNSET,
    BackendError,
    ChatSessionService,
    InvalidArgument,
    SessionError,
    SessionNotFound,
)


router = APIRouter(prefix="/api", tags=["sessions"])


def _http_error(exc: SessionError) -> HTTPException:
    if isinstance(exc, SessionNotFound):
        return not_found(str(exc), details={"session_id": exc.session_id})
    if isinstance(exc, InvalidArgument):
        return bad_request(str(exc), details={"field": exc.field})
    if isinstance(exc, BackendError):
        details = {"upstream_status": exc.status_code} if exc.status_code else None
        return bad_gateway(f"Error processing message: {exc}", details=details)
    return bad_request(str(exc))


def _provided(payload: Any, field: str) -> Any:
    return getattr(payload, field) if field in payload.model_fields_set else UNSET


@router.post("/session/new", response_model=CreateSessionResponse)
async def create_session_endpoint(
    service: ChatSessionService = Depends(get_session_service),
) -> CreateSessionResponse:
    """
    Create a new empty session with the default configuration.
    """
    return CreateSessionResponse(session_id=service.create_session())


@router.get(
    "/session/{session_id}/exists",
    response_model=SessionExistsResponse,
    response_model_exclude_none=True,
)
async def session_exists_endpoint(
    session_id: str,
    service: ChatSessionService = Depends(get_session_service),
) -> SessionExistsResponse:
    """
    Report whether a session exists without counting the probe as activity.
    """
    probe = service.session_exists(session_id)
    if not probe.exists:
        return SessionExistsResponse(exists=False, session_id=session_id)
    return SessionExistsResponse(
        exists=True,
        session_id=session_id,
        created_at=epoch_to_datetime(probe.created_at),
        last_activity=epoch_to_datetime(probe.last_activity),
        message_count=probe.message_count,
    )


@router.post("/chat", response_model=ChatResponse)
async def chat_endpoint(
    payload: ChatRequest,
    service: ChatSessionService = Depends(get_session_service),
) -> ChatResponse:
    try:
        result = await service.run_turn(
            payload.session_id,
            payload.message,
            system_prompt=_provided(payload, "system_prompt"),
            temperature=_provided(payload, "temperature"),
        )
    except SessionError as exc:
        raise _http_error(exc) from exc

    return ChatResponse(
        session_id=result.session_id,
        response=result.reply,
        timestamp=epoch_to_datetime(result.timestamp),
    )


@router.get("/session/{session_id}/history", response_model=SessionHistoryResponse)
async def session_history_endpoint(
    session_id: str,
    service: ChatSessionService = Depends(get_session_service),
) -> SessionHistoryResponse:
    try:
        session = service.get_history(session_id)
    except SessionError as exc:
        raise _http_error(exc) from exc

    return SessionHistoryResponse(
        session_id=session_id,
        message_count=session.message_count,
        messages=[MessageOut(role=m.role, content=m.content) for m in session.history],
        system_prompt=session.system_prompt,
        temperature=session.temperature,
        created_at=epoch_to_datetime(session.created_at),
        last_activity=epoch_to_datetime(session.last_activity),
    )


@router.delete("/session/{session_id}/clear", response_model=SessionActionResponse)
async def clear_history_endpoint(
    session_id: str,
    service: ChatSessionService = Depends(get_session_service),
) -> SessionActionResponse:
    """
    Drop the session's history; prompt and temperature are kept.
    """
    try:
        await service.clear_history(session_id)
    except SessionError as exc:
        raise _http_error(exc) from exc
    return SessionActionResponse(message="History cleared successfully", session_id=session_id)


@router.put("/session/{session_id}/config", response_model=ConfigUpdateResponse)
async def update_config_endpoint(
    session_id: str,
    payload: ConfigUpdateRequest | None = None,
    service: ChatSessionService = Depends(get_session_service),
) -> ConfigUpdateResponse:
    payload = payload or ConfigUpdateRequest()
    try:
        session = await service.update_config(
            session_id,
            system_prompt=_provided(payload, "system_prompt"),
            temperature=_provided(payload, "temperature"),
        )
    except SessionError as exc:
        raise _http_error(exc) from exc

    return ConfigUpdateResponse(
        session_id=session_id,
        system_prompt=session.system_prompt,
        temperature=session.temperature,
    )


@router.delete("/session/{session_id}", response_model=SessionActionResponse)
async def delete_session_endpoint(
    session_id: str,
    service: ChatSessionService = Depends(get_session_service),
) -> SessionActionResponse:
    try:
        service.delete_session(session_id)
    except SessionError as exc:
        raise _http_error(exc) from exc
    return SessionActionResponse(message="Session deleted successfully", session_id=session_id)


@router.get("/status", response_model=StatusResponse)
async def status_endpoint(
    service: ChatSessionService = Depends(get_session_service),
) -> StatusResponse:
    status = service.status()
    return StatusResponse(active_sessions=status.active_sessions, uptime=status.uptime)


__all__ = ["router"]
