"""Prometheus metrics for the HTTP surface and upstream RPC calls."""

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUEST_COUNT = Counter(
    "ethnode_api_requests_total",
    "HTTP requests served",
    ["method", "path", "status"],
)
REQUEST_DURATION = Histogram(
    "ethnode_api_request_duration_seconds",
    "HTTP request duration",
    ["method", "path"],
)
RPC_CALLS = Counter(
    "ethnode_api_rpc_calls_total",
    "JSON-RPC calls to the node by outcome",
    ["method", "outcome"],
)
RPC_DURATION = Histogram(
    "ethnode_api_rpc_duration_seconds",
    "JSON-RPC call duration",
    ["method"],
)


def render_latest() -> tuple[bytes, str]:
    """Return (body, content type) of the current exposition."""
    return generate_latest(), CONTENT_TYPE_LATEST
