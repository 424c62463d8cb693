from fastapi import Request

from .sessions import ChatSessionService


def get_session_service(request: Request) -> ChatSessionService:
    """
    FastAPI dependency returning the service built by the app lifespan.

    Tests swap in a fake model backend and their own store through
    create_app(backend=..., store=...).
    """
    return request.app.state.session_service
