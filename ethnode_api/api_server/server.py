"""
FastAPI server — read-only API over the Ethereum dev-node.

Exposes GET /health, GET /ready, GET /balance/{address}/balance and GET /metrics.
One EthereumRpcClient is created in the lifespan and shared by all requests.
Upstream failures become 5xx responses; the process keeps serving.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from ethnode_api import __version__
from ethnode_api.api_server.balance import router as balance_router
from ethnode_api.api_server.dependencies import get_rpc_client
from ethnode_api.api_server.middleware import log_requests
from ethnode_api.config import Settings, get_settings
from ethnode_api.core.exceptions import (
    InvalidAddressError,
    InvalidBlockTagError,
    RpcError,
    RpcUnavailableError,
)
from ethnode_api.ethereum.rpc import EthereumRpcClient
from ethnode_api.ethnode_logging import get_logger
from ethnode_api.telemetry.metrics import render_latest
from ethnode_api.telemetry.tracing import flush_tracing, setup_tracing

logger = get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE"]
CORS_HEADERS = ["Content-Type", "Authorization"]


# -----------------------------------------------------------------------------
# Exception handlers
# -----------------------------------------------------------------------------


async def invalid_input_handler(request: Request, exc: Exception) -> JSONResponse:
    """400 for malformed address / block; the node was never contacted."""
    logger.warning("request_rejected", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def rpc_error_handler(request: Request, exc: RpcError) -> JSONResponse:
    """503 when the node is unreachable, 502 when it answered with an error or garbage."""
    status_code = 503 if isinstance(exc, RpcUnavailableError) else 502
    logger.error(
        "upstream_rpc_failed",
        path=request.url.path,
        method=exc.method,
        error=exc.message,
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": f"Ethereum RPC {exc.method} failed: {exc.message}"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------


def create_app(
    settings: Settings | None = None,
    rpc_client: EthereumRpcClient | None = None,
) -> FastAPI:
    """
    Build the ASGI app.

    Args:
        settings: Resolved settings; defaults to get_settings().
        rpc_client: Pre-built client (tests inject one backed by httpx.MockTransport).
            When given, the app does not close it on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # noqa: ANN202
        setup_tracing(settings)
        owned = rpc_client is None
        client = rpc_client or EthereumRpcClient.from_settings(settings)
        app.state.rpc_client = client
        logger.info("api_started", rpc_url=client.rpc_url, version=__version__)
        try:
            yield
        finally:
            if owned:
                await client.aclose()
            flush_tracing()
            logger.info("api_stopped")

    app = FastAPI(
        title="Ethnode API",
        description="Read-only balance API over an Ethereum JSON-RPC dev-node.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(InvalidAddressError, invalid_input_handler)
    app.add_exception_handler(InvalidBlockTagError, invalid_input_handler)
    app.add_exception_handler(RpcError, rpc_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    app.middleware("http")(log_requests)

    app.include_router(balance_router)

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness probe: API is up."""
        return {"status": "ok"}

    @app.get("/ready", response_model=None)
    async def ready(rpc: EthereumRpcClient = Depends(get_rpc_client)) -> JSONResponse | dict[str, Any]:
        """Readiness probe: the node answers eth_chainId and eth_blockNumber."""
        try:
            chain_id = await rpc.get_chain_id()
            block_number = await rpc.get_block_number()
        except RpcError as e:
            logger.warning("readiness_check_failed", error=str(e))
            return JSONResponse(
                status_code=503,
                content={"status": "unavailable", "detail": str(e)},
            )
        return {"status": "ready", "chain_id": chain_id, "block_number": block_number}

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        body, content_type = render_latest()
        return Response(body, media_type=content_type)

    return app


app = create_app()
