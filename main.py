import socket

from chatsession.logging_config import logger, setup_logging
from chatsession.routes import create_app
from chatsession.settings import settings


# Configure logging once for the whole process.
setup_logging()

# FastAPI application instance for uvicorn.
app = create_app()


def _local_ip() -> str:
    """
    Best-effort LAN address, used only for the startup banner.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        try:
            # No packet is sent; connecting a UDP socket only picks a route.
            sock.connect(("10.255.255.255", 1))
            return sock.getsockname()[0]
        except OSError:
            return "localhost"


def run() -> None:
    import uvicorn

    port = settings.port
    logger.info("Chat session server starting on port %s", port)
    logger.info("Local:   http://localhost:%s", port)
    logger.info("Network: http://%s:%s", _local_ip(), port)
    logger.info("Status:  http://localhost:%s/api/status", port)
    if settings.enable_api_docs:
        logger.info("Docs:    http://localhost:%s/docs", port)

    # Use our own logging configuration configured in chatsession.logging_config.
    uvicorn.run("main:app", host=settings.host, port=port, log_config=None)


if __name__ == "__main__":
    run()
