"""
OpenTelemetry tracing setup.

When OTEL_EXPORTER_OTLP_ENDPOINT is set, spans are batched and shipped to the
collector over OTLP/gRPC. Otherwise the global no-op provider stays in place
and span calls cost nothing.

The global provider can be set only once per process, so it is installed by
the first setup_tracing() call and stays installed. Application shutdown
only flushes it; the exporter is shut down at interpreter exit.
"""

from __future__ import annotations

import atexit
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from ethnode_api.ethnode_logging import get_logger

logger = get_logger(__name__)

TRACER_NAME = "ethnode_api"
FLUSH_TIMEOUT_MS = 5000

_provider: TracerProvider | None = None


def setup_tracing(settings: Any) -> bool:
    """
    Install the OTLP tracer provider. Returns True when export is enabled.
    Later calls reuse the installed provider.
    """
    global _provider
    if _provider is not None:
        return True
    endpoint = getattr(settings, "otlp_endpoint", None)
    if not endpoint:
        logger.info("tracing_disabled", reason="OTEL_EXPORTER_OTLP_ENDPOINT not set")
        return False

    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: settings.service_name})
    )
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(provider)
    _provider = provider
    atexit.register(shutdown_tracing)
    logger.info("tracing_enabled", endpoint=endpoint, service_name=settings.service_name)
    return True


def flush_tracing() -> None:
    """Export pending spans; the provider keeps accepting new ones."""
    if _provider is None:
        return
    if not _provider.force_flush(FLUSH_TIMEOUT_MS):
        logger.warning("tracing_flush_timeout", timeout_ms=FLUSH_TIMEOUT_MS)


def shutdown_tracing() -> None:
    """Flush and stop the exporter. Registered with atexit by setup_tracing()."""
    global _provider
    if _provider is None:
        return
    try:
        _provider.shutdown()
    except Exception as e:
        logger.warning("tracing_shutdown_failed", error=str(e))
    _provider = None


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(TRACER_NAME)
