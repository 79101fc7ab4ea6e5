"""
Environment variable loading and validation for Ethnode API.

- ETHEREUM_RPC_URL: JSON-RPC endpoint of the dev-node (default http://localhost:8545)
- OTEL_EXPORTER_OTLP_ENDPOINT: OTLP/gRPC collector; unset disables trace export
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from ethnode_api.core.exceptions import ConfigError
from ethnode_api.ethnode_logging import get_logger

logger = get_logger(__name__)

# Project root: config is ethnode_api/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_ROOT = _CONFIG_DIR.parent.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_ETHEREUM_RPC_URL = "http://localhost:8545"
DEFAULT_STATE_PATH = "/data/anvil_state.json"
DEFAULT_GAS_LIMIT = 3_000_000_000


def load_env() -> None:
    """Load .env from project root. Real environment variables win. Safe to call multiple times."""
    load_dotenv(_ENV_PATH, override=False)


def env_str(name: str, default: str) -> str:
    """Return a stripped env value, or default when unset/blank."""
    raw = (os.getenv(name) or "").strip()
    return raw or default


def env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw.replace("_", ""))
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if minimum is not None and value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


def env_float(name: str, default: float, *, greater_than: float | None = None) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if greater_than is not None and value <= greater_than:
        raise ConfigError(f"{name} must be > {greater_than}, got {value}")
    return value


def get_ethereum_rpc_url() -> str:
    """
    Resolve the JSON-RPC endpoint from ETHEREUM_RPC_URL.
    Falls back to the local dev-node default, logging an error so a missing
    variable in a deployment is visible.
    """
    url = (os.getenv("ETHEREUM_RPC_URL") or "").strip()
    if url:
        return url
    logger.error("ethereum_rpc_url_missing", default=DEFAULT_ETHEREUM_RPC_URL)
    return DEFAULT_ETHEREUM_RPC_URL


def get_otlp_endpoint() -> str | None:
    """Return OTEL_EXPORTER_OTLP_ENDPOINT, or None when tracing export is disabled."""
    endpoint = (os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or "").strip()
    return endpoint or None


def get_cors_origins() -> list[str]:
    raw = (os.getenv("CORS_ORIGINS") or "").strip()
    if not raw:
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "console")


def get_log_level() -> str:
    level = env_str("LOG_LEVEL", "INFO").upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
    return level


def get_log_format() -> str:
    fmt = env_str("LOG_FORMAT", "json").lower()
    if fmt not in LOG_FORMATS:
        raise ConfigError(f"LOG_FORMAT must be json or console, got {fmt!r}")
    return fmt
