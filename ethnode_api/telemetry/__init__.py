"""
Telemetry — OTLP trace export and Prometheus metrics.

Both are side channels: a collector that is down never fails a request.
"""

from ethnode_api.telemetry.tracing import flush_tracing, get_tracer, setup_tracing, shutdown_tracing

__all__ = ["flush_tracing", "get_tracer", "setup_tracing", "shutdown_tracing"]
