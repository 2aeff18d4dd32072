"""Server module entry point for running with python -m server."""

import os

import uvicorn

from gitbook2epub.utils.logging_config import get_logger
from server.server_config import DEFAULT_HOST, DEFAULT_PORT

logger = get_logger(__name__)

if __name__ == "__main__":
    # Get configuration from environment variables
    host = os.getenv("HOST", DEFAULT_HOST)
    port = int(os.getenv("PORT", str(DEFAULT_PORT)))
    reload = os.getenv("RELOAD", "false").lower() == "true"

    logger.info(
        "Starting gitbook2epub server",
        extra={
            "host": host,
            "port": port,
        },
    )

    uvicorn.run(
        "server.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,  # Disable uvicorn's default logging config
    )
