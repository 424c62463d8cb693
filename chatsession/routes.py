import uuid
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .logging_config import logger
from .session_routes import router as session_router
from .sessions import ChatSessionService, ExpiryReaper, SessionStore, TurnExecutor
from .settings import settings
from .upstream import ModelBackend, OpenAIChatBackend


class HealthResponse(BaseModel):
    status: str = "ok"


async def handle_unexpected_error(request: Request, exc: Exception):
    """
    Global exception handler: log the traceback and return a structured 500.
    """
    error_id = uuid.uuid4().hex
    logger.exception(
        "Unhandled error %s %s (error_id=%s)",
        request.method,
        request.url.path,
        error_id,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error_code": "internal_error",
            "message": "Internal server error, please try again later",
            "error_id": error_id,
        },
    )


def create_app(
    *,
    backend: Optional[ModelBackend] = None,
    store: Optional[SessionStore] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    ``backend`` and ``store`` default to an OpenAI-compatible HTTP backend
    and a fresh in-memory store configured from settings.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        http_client: Optional[httpx.AsyncClient] = None
        model_backend = backend
        if model_backend is None:
            if not settings.openai_api_key:
                logger.warning("OPENAI_API_KEY is not set; backend calls will likely fail")
            http_client = httpx.AsyncClient(timeout=settings.upstream_timeout)
            model_backend = OpenAIChatBackend(
                client=http_client,
                base_url=settings.openai_base_url,
                model=settings.openai_model,
                api_key=settings.openai_api_key,
                max_tokens=settings.openai_max_tokens,
            )

        session_store = store or SessionStore(
            default_system_prompt=settings.default_system_prompt,
            default_temperature=settings.default_temperature,
        )
        app.state.session_service = ChatSessionService(
            session_store, TurnExecutor(session_store, model_backend)
        )
        reaper = ExpiryReaper(
            session_store,
            inactivity_minutes=settings.session_inactivity_minutes,
            interval_seconds=settings.session_sweep_interval_seconds,
        )
        app.state.reaper = reaper
        reaper.start()
        try:
            yield
        finally:
            await reaper.stop()
            if http_client is not None:
                await http_client.aclose()

    app = FastAPI(
        title="Chat Session Manager",
        version="0.1.0",
        docs_url="/docs" if settings.enable_api_docs else None,
        redoc_url="/redoc" if settings.enable_api_docs else None,
        openapi_url="/openapi.json" if settings.enable_api_docs else None,
        lifespan=lifespan,
    )
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(session_router)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        client_host = request.client.host if request.client else "-"
        logger.info("HTTP %s %s from %s", request.method, request.url.path, client_host)
        response = await call_next(request)
        logger.info(
            "HTTP %s %s -> %s", request.method, request.url.path, response.status_code
        )
        return response

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse()

    return app
