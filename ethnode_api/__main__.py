"""
Run the API server: python -m ethnode_api

Env: ETHEREUM_RPC_URL, OTEL_EXPORTER_OTLP_ENDPOINT, API_HOST, API_PORT, LOG_LEVEL, etc.
"""

from __future__ import annotations

import sys

import uvicorn

from ethnode_api.config import get_settings
from ethnode_api.core.exceptions import ConfigError
from ethnode_api.ethnode_logging import configure_stdlib_logging, get_logger

logger = get_logger("main")


def main() -> int:
    """Resolve settings, then serve the FastAPI app with uvicorn in the main thread."""
    try:
        settings = get_settings()
    except ConfigError as e:
        logger.error("main_config_error", error=str(e))
        return 2

    from ethnode_api.api_server.app import app

    # uvicorn's own loggers render through structlog; log_config=None keeps uvicorn from replacing them
    configure_stdlib_logging(settings.log_level, settings.log_format)
    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
