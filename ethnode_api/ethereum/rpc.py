"""
Async Ethereum JSON-RPC client.

Responsibilities:
- Hold one pooled httpx.AsyncClient shared by all concurrent requests.
- Build JSON-RPC 2.0 bodies and turn transport failures, JSON-RPC error
  objects and malformed results into RpcError subclasses.
- Decode hex quantities into arbitrary-precision ints (balances exceed 2^53).

No retries: a failed call surfaces to the caller immediately.
"""

from __future__ import annotations

import itertools
import re
import time
from typing import Any, Sequence

import httpx

from ethnode_api.core.exceptions import (
    InvalidBlockTagError,
    RpcDecodeError,
    RpcResponseError,
    RpcUnavailableError,
)
from ethnode_api.ethnode_logging import get_logger
from ethnode_api.telemetry.metrics import RPC_CALLS, RPC_DURATION

logger = get_logger(__name__)

BLOCK_TAGS = frozenset({"latest", "earliest", "pending", "safe", "finalized"})
# Digits only: no sign, whitespace or underscores
_HEX_QUANTITY = re.compile(r"0[xX][0-9a-fA-F]+")
_DECIMAL = re.compile(r"[0-9]+")
DEFAULT_TIMEOUT_SEC = 10.0
DEFAULT_MAX_CONNECTIONS = 100

# JSON-RPC request id counter
_request_ids = itertools.count(1)


def _next_id() -> int:
    return next(_request_ids)


def _build_rpc_body(method: str, params: Sequence[Any]) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": _next_id(),
        "method": method,
        "params": list(params),
    }


def normalize_block_tag(block: str | int | None) -> str:
    """
    Return the block selector in wire form.

    Known tags pass through (lower-cased), 0x-prefixed hex numbers are
    normalized, decimal numbers and ints are converted to hex. None means latest.
    """
    if block is None:
        return "latest"
    if isinstance(block, int) and not isinstance(block, bool):
        if block < 0:
            raise InvalidBlockTagError(str(block))
        return hex(block)
    value = str(block).strip().lower()
    if value in BLOCK_TAGS:
        return value
    if _HEX_QUANTITY.fullmatch(value):
        return hex(int(value[2:], 16))
    if _DECIMAL.fullmatch(value):
        return hex(int(value))
    raise InvalidBlockTagError(str(block))


def parse_quantity(value: Any, *, method: str) -> int:
    """Decode a JSON-RPC hex quantity ("0x1a") into an int."""
    if not isinstance(value, str) or not _HEX_QUANTITY.fullmatch(value):
        raise RpcDecodeError(method, f"expected hex quantity, got {value!r}")
    return int(value[2:], 16)


class EthereumRpcClient:
    """
    Read-only JSON-RPC client for an Ethereum-compatible node.

    Safe for concurrent use from many request handlers: the underlying
    httpx.AsyncClient pools connections and holds no per-request state.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        max_connections: int = DEFAULT_MAX_CONNECTIONS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            rpc_url: JSON-RPC HTTP endpoint (e.g. http://anvil:8545).
            timeout_sec: HTTP timeout for each RPC request.
            max_connections: Connection pool size shared by concurrent callers.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
        """
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        if timeout_sec <= 0:
            raise ValueError("timeout_sec must be positive")

        self._rpc_url = rpc_url.strip()
        self._timeout_sec = timeout_sec
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_sec),
            limits=httpx.Limits(max_connections=max_connections),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "EthereumRpcClient":
        return cls(settings.ethereum_rpc_url, timeout_sec=settings.rpc_timeout_sec)

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    async def __aenter__(self) -> "EthereumRpcClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def call(self, method: str, params: Sequence[Any] = (), *, quantity: bool = False) -> Any:
        """
        Issue one JSON-RPC call and return its result.

        Raises:
            RpcUnavailableError: connection failure, timeout, or non-2xx HTTP status.
            RpcResponseError: the node returned a JSON-RPC error object.
            RpcDecodeError: the body is not a JSON-RPC response, or quantity=True
                and the result is not a hex quantity.
        """
        body = _build_rpc_body(method, params)
        start = time.perf_counter()
        try:
            result = await self._send(method, body)
            if quantity:
                result = parse_quantity(result, method=method)
        except RpcUnavailableError:
            RPC_CALLS.labels(method=method, outcome="unavailable").inc()
            raise
        except RpcResponseError:
            RPC_CALLS.labels(method=method, outcome="rpc_error").inc()
            raise
        except RpcDecodeError:
            RPC_CALLS.labels(method=method, outcome="decode_error").inc()
            raise
        finally:
            RPC_DURATION.labels(method=method).observe(time.perf_counter() - start)
        RPC_CALLS.labels(method=method, outcome="ok").inc()
        return result

    async def _send(self, method: str, body: dict[str, Any]) -> Any:
        try:
            resp = await self._client.post(self._rpc_url, json=body)
            resp.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning("rpc_timeout", method=method, rpc_url=self._rpc_url, timeout_sec=self._timeout_sec)
            raise RpcUnavailableError(method, f"node did not answer within {self._timeout_sec}s") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("rpc_http_error", method=method, rpc_url=self._rpc_url, status=status)
            raise RpcUnavailableError(method, f"node answered with HTTP {status}") from e
        except httpx.HTTPError as e:
            logger.warning("rpc_unavailable", method=method, rpc_url=self._rpc_url, error=str(e))
            raise RpcUnavailableError(method, f"node unreachable ({type(e).__name__})") from e

        try:
            data = resp.json()
        except ValueError as e:
            logger.warning("rpc_invalid_json", method=method, body=resp.text[:200])
            raise RpcDecodeError(method, "response is not valid JSON") from e
        if not isinstance(data, dict):
            raise RpcDecodeError(method, "response is not a JSON-RPC object")

        err = data.get("error")
        if err is not None:
            if isinstance(err, dict):
                code = err.get("code")
                message = str(err.get("message") or "unknown error")
                extra = err.get("data")
            else:
                code, message, extra = None, str(err), None
            logger.warning("rpc_error_response", method=method, code=code, error=message)
            raise RpcResponseError(method, code if isinstance(code, int) else None, message, extra)
        if "result" not in data:
            raise RpcDecodeError(method, "response has neither result nor error")
        logger.debug("rpc_call_ok", method=method, request_id=body["id"])
        return data["result"]

    async def get_balance(self, address: str, block: str | int | None = "latest") -> int:
        """eth_getBalance: wei held by address at block, as an int."""
        tag = normalize_block_tag(block)
        return await self.call("eth_getBalance", [address, tag], quantity=True)

    async def get_chain_id(self) -> int:
        """eth_chainId."""
        return await self.call("eth_chainId", quantity=True)

    async def get_block_number(self) -> int:
        """eth_blockNumber."""
        return await self.call("eth_blockNumber", quantity=True)
