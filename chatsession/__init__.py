"""
Chat session manager package.

This package contains:
- settings: configuration loaded from the environment / .env
- logging_config: shared logging setup
- sessions: session store, prompt assembly, turn execution and expiry
- upstream: OpenAI-compatible chat completions backend
- deps: FastAPI dependencies
- session_routes / routes: HTTP endpoints and the FastAPI app factory
"""
