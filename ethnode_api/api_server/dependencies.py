from __future__ import annotations

from fastapi import Request

from ethnode_api.ethereum.rpc import EthereumRpcClient


def get_rpc_client(request: Request) -> EthereumRpcClient:
    """FastAPI dependency: the shared RPC client created in the app lifespan."""
    client = getattr(request.app.state, "rpc_client", None)
    if not isinstance(client, EthereumRpcClient):
        raise RuntimeError("RPC client not initialized; app lifespan has not run")
    return client
