"""
Ethereum JSON-RPC access — address validation and an async read-only client.

The API server never talks to the node directly; it goes through
EthereumRpcClient so that transport errors become RpcError subclasses.
"""

from ethnode_api.ethereum.address import is_valid_address, normalize_address
from ethnode_api.ethereum.rpc import EthereumRpcClient, normalize_block_tag, parse_quantity

__all__ = [
    "EthereumRpcClient",
    "is_valid_address",
    "normalize_address",
    "normalize_block_tag",
    "parse_quantity",
]
