"""
Core — cross-cutting exceptions shared by the API server, RPC client and dev-node launcher.
"""

from ethnode_api.core.exceptions import (
    ConfigError,
    EthnodeError,
    InvalidAddressError,
    InvalidBlockTagError,
    RpcDecodeError,
    RpcError,
    RpcResponseError,
    RpcUnavailableError,
)

__all__ = [
    "ConfigError",
    "EthnodeError",
    "InvalidAddressError",
    "InvalidBlockTagError",
    "RpcDecodeError",
    "RpcError",
    "RpcResponseError",
    "RpcUnavailableError",
]
