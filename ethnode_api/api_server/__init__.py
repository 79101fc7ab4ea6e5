"""
API server package — HTTP interface over the Ethereum dev-node.

Exposes liveness/readiness probes, balance lookups and Prometheus metrics.
Chain reads are delegated to EthereumRpcClient; nothing is cached here.
"""
