"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and .env files.
- Validate values and provide defaults for optional ones.
- Expose typed settings (RPC URL, OTLP endpoint, API bind address, dev-node
  snapshot path, etc.) for use across the API server and dev-node launcher.
"""

from __future__ import annotations

import functools
import shlex
from dataclasses import dataclass, field
from pathlib import Path

from ethnode_api.config.env import (
    DEFAULT_GAS_LIMIT,
    DEFAULT_STATE_PATH,
    env_float,
    env_int,
    env_str,
    get_cors_origins,
    get_ethereum_rpc_url,
    get_log_format,
    get_log_level,
    get_otlp_endpoint,
    load_env,
)


@dataclass(frozen=True)
class Settings:
    """Resolved service configuration."""

    ethereum_rpc_url: str
    otlp_endpoint: str | None = None
    service_name: str = "ethnode-api"
    api_host: str = "0.0.0.0"
    api_port: int = 3030
    rpc_timeout_sec: float = 10.0
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    anvil_state_path: Path = Path(DEFAULT_STATE_PATH)
    anvil_host: str = "0.0.0.0"
    anvil_port: int = 8545
    anvil_gas_limit: int = DEFAULT_GAS_LIMIT
    anvil_command: tuple[str, ...] = ("anvil",)
    log_level: str = "INFO"
    log_format: str = "json"

    @classmethod
    def from_env(cls) -> "Settings":
        load_env()
        return cls(
            ethereum_rpc_url=get_ethereum_rpc_url(),
            otlp_endpoint=get_otlp_endpoint(),
            service_name=env_str("OTEL_SERVICE_NAME", "ethnode-api"),
            api_host=env_str("API_HOST", "0.0.0.0"),
            api_port=env_int("API_PORT", 3030, minimum=1),
            rpc_timeout_sec=env_float("RPC_TIMEOUT_SEC", 10.0, greater_than=0),
            cors_origins=get_cors_origins(),
            anvil_state_path=Path(env_str("ANVIL_STATE_PATH", DEFAULT_STATE_PATH)),
            anvil_host=env_str("ANVIL_HOST", "0.0.0.0"),
            anvil_port=env_int("ANVIL_PORT", 8545, minimum=1),
            anvil_gas_limit=env_int("ANVIL_GAS_LIMIT", DEFAULT_GAS_LIMIT, minimum=1),
            anvil_command=tuple(shlex.split(env_str("ANVIL_BIN", "anvil"))),
            log_level=get_log_level(),
            log_format=get_log_format(),
        )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the current application settings (read once, then cached).

    Raises:
        ConfigError: when a variable holds an invalid value.
    """
    return Settings.from_env()


def reset_settings_cache() -> None:
    """Drop cached settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
