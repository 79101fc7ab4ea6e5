"""
Pytest fixtures for Ethnode API tests.

The JSON-RPC node is faked with httpx.MockTransport; no network access.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from ethnode_api.config import Settings, reset_settings_cache
from ethnode_api.ethereum.rpc import EthereumRpcClient

RPC_URL = "http://node.test:8545"
# First Anvil dev account
VALID_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
ANVIL_CHAIN_ID = 31337


class FakeNode:
    """
    JSON-RPC handler for httpx.MockTransport.

    Answers eth_getBalance from a balance table (unknown accounts hold 0),
    eth_chainId and eth_blockNumber. Records every request body in calls.
    Flip unreachable / timeout / http_status / error to simulate failures.
    """

    def __init__(self) -> None:
        self.balances: dict[str, int] = {}
        self.chain_id = ANVIL_CHAIN_ID
        self.block_number = 0
        self.calls: list[dict[str, Any]] = []
        self.unreachable = False
        self.timeout = False
        self.http_status: int | None = None
        self.error: dict[str, Any] | None = None
        self.raw_result: Any = None

    def set_balance(self, address: str, wei: int) -> None:
        self.balances[address.lower()] = wei

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.unreachable:
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)
        if self.timeout:
            raise httpx.ReadTimeout("timed out", request=request)
        body = json.loads(request.content)
        self.calls.append(body)
        if self.http_status is not None:
            return httpx.Response(self.http_status, text="upstream failure")
        if self.error is not None:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": self.error})
        if self.raw_result is not None:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": self.raw_result})

        method = body["method"]
        if method == "eth_getBalance":
            result = hex(self.balances.get(body["params"][0].lower(), 0))
        elif method == "eth_chainId":
            result = hex(self.chain_id)
        elif method == "eth_blockNumber":
            result = hex(self.block_number)
        else:
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32601, "message": "Method not found"}},
            )
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Each test reads the environment again."""
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def fake_node() -> FakeNode:
    return FakeNode()


@pytest.fixture
def rpc_client(fake_node):
    client = EthereumRpcClient(RPC_URL, timeout_sec=2.0, transport=httpx.MockTransport(fake_node))
    yield client
    asyncio.run(client.aclose())


@pytest.fixture
def settings() -> Settings:
    return Settings(ethereum_rpc_url=RPC_URL)


@pytest.fixture
def client(settings, rpc_client):
    """FastAPI TestClient with the lifespan running and the fake node injected."""
    from fastapi.testclient import TestClient

    from ethnode_api.api_server.server import create_app

    app = create_app(settings=settings, rpc_client=rpc_client)
    with TestClient(app) as c:
        yield c
