"""
Application-level exceptions.

Client input errors (InvalidAddressError, InvalidBlockTagError) are raised
before any upstream call. RpcError subclasses describe how the JSON-RPC node
failed; the API server maps them to 5xx responses.
"""

from __future__ import annotations

from typing import Any


class EthnodeError(Exception):
    """Base class for all Ethnode API errors."""


class ConfigError(EthnodeError):
    """Invalid configuration value (environment or CLI)."""


class InvalidAddressError(EthnodeError, ValueError):
    """Account identifier is not a 20-byte hex address."""

    def __init__(self, address: str, reason: str) -> None:
        self.address = address
        self.reason = reason
        super().__init__(f"Invalid Ethereum address {address!r}: {reason}")


class InvalidBlockTagError(EthnodeError, ValueError):
    """Block selector is neither a known tag nor a block number."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(
            f"Invalid block {tag!r}: expected latest, earliest, pending, safe, "
            "finalized, a 0x-prefixed hex number or a decimal number"
        )


class RpcError(EthnodeError):
    """Upstream JSON-RPC call failed."""

    def __init__(self, method: str, message: str) -> None:
        self.method = method
        self.message = message
        super().__init__(f"{method} failed: {message}")


class RpcUnavailableError(RpcError):
    """Node unreachable, timed out, or answered with a non-2xx HTTP status."""


class RpcResponseError(RpcError):
    """Node answered with a JSON-RPC error object."""

    def __init__(self, method: str, code: int | None, message: str, data: Any = None) -> None:
        self.code = code
        self.data = data
        super().__init__(method, f"RPC error {code}: {message}" if code is not None else message)


class RpcDecodeError(RpcError):
    """Node answered with something that is not a valid JSON-RPC result."""
