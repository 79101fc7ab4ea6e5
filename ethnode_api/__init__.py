"""
Ethnode API — read-only HTTP service over a local Ethereum dev-node.

Serves account balances by proxying eth_getBalance to a JSON-RPC node,
ships traces over OTLP, and carries the dev-node launcher that keeps chain
state across restarts through a snapshot file.
"""

__version__ = "0.1.0"
