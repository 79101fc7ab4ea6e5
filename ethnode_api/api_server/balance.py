"""
FastAPI router: GET /balance/{address}/balance (and the short /balance/{address}).

Validates the address before any upstream call, then reads the balance from
the node with a single eth_getBalance. The wei amount is returned as a decimal
string so clients never lose precision on values above 2^53.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field

from ethnode_api.api_server.dependencies import get_rpc_client
from ethnode_api.ethereum.address import normalize_address
from ethnode_api.ethereum.rpc import EthereumRpcClient, normalize_block_tag
from ethnode_api.ethnode_logging import get_logger
from ethnode_api.telemetry.tracing import get_tracer

logger = get_logger(__name__)

router = APIRouter(prefix="/balance", tags=["balance"])


class BalanceResponse(BaseModel):
    """Balance lookup result."""

    address: str = Field(..., description="EIP-55 checksummed address")
    balance: str = Field(..., description="Balance in wei as a decimal string")
    block: str = Field("latest", description="Block tag or hex number the balance was read at")


async def lookup_balance(address: str, block: str | None, rpc: EthereumRpcClient) -> BalanceResponse:
    """
    Resolve one balance read inside a get_balance span.
    InvalidAddressError / InvalidBlockTagError are raised before the node is contacted.
    """
    tracer = get_tracer()
    with tracer.start_as_current_span("get_balance") as span:
        logger.info("balance_lookup_started", address=address)
        checksum = normalize_address(address)
        tag = normalize_block_tag(block)
        span.set_attribute("eth.address", checksum)
        span.set_attribute("eth.block", tag)

        balance = await rpc.get_balance(checksum, tag)

        logger.info("balance_fetched", address=checksum, block=tag, balance=str(balance))
        span.add_event("Fetched balance", {"balance": str(balance)})
    return BalanceResponse(address=checksum, balance=str(balance), block=tag)


@router.get("/{address}/balance", response_model=BalanceResponse)
async def get_balance(
    address: str = Path(..., description="20-byte hex account address, 0x prefix optional"),
    block: str = Query("latest", description="latest | earliest | pending | safe | finalized | block number"),
    rpc: EthereumRpcClient = Depends(get_rpc_client),
) -> BalanceResponse:
    """Return the native balance of address, read from the node."""
    return await lookup_balance(address, block, rpc)


@router.get("/{address}", response_model=BalanceResponse)
async def get_balance_short(
    address: str = Path(..., description="20-byte hex account address, 0x prefix optional"),
    block: str = Query("latest"),
    rpc: EthereumRpcClient = Depends(get_rpc_client),
) -> BalanceResponse:
    """Same as /balance/{address}/balance; kept for clients of the first API version."""
    return await lookup_balance(address, block, rpc)
