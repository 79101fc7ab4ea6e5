"""
Structured logging for the API server and dev-node launcher.

Every line is one JSON object (or a console line with LOG_FORMAT=console)
with timestamp, level, logger and event_type. Lines written inside an
OpenTelemetry span carry its trace_id / span_id so they join the exported
traces. Records from stdlib loggers (uvicorn, httpx) go through the same
processors once configure_stdlib_logging() has run.

No ethnode_api imports here: config and everything else import this module.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog
from opentelemetry import trace

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

_STDLIB_HANDLER_NAME = "ethnode_structlog"


def _level_value(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _rename_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog 'event' becomes event_type; uvicorn messages land there too."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def add_trace_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Stamp trace_id / span_id of the active span, in the hex form OTLP backends show."""
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        event_dict.setdefault("trace_id", format(ctx.trace_id, "032x"))
        event_dict.setdefault("span_id", format(ctx.span_id, "016x"))
    return event_dict


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_timestamp,
        add_trace_context,
    ]


def _renderer(log_format: str) -> Any:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def configure_structlog(level: str = LOG_LEVEL, log_format: str = LOG_FORMAT) -> None:
    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _rename_event,
            _renderer(log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_value(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


def stdlib_formatter(log_format: str = LOG_FORMAT) -> structlog.stdlib.ProcessorFormatter:
    """Formatter that renders stdlib LogRecords like structlog events."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            *_shared_processors(),
            structlog.stdlib.add_logger_name,
            structlog.processors.format_exc_info,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _rename_event,
            _renderer(log_format),
        ],
    )


def configure_stdlib_logging(level: str = LOG_LEVEL, log_format: str = LOG_FORMAT) -> None:
    """
    Send stdlib logging (uvicorn, httpx) to stdout through stdlib_formatter().
    Replaces the handler installed by an earlier call; other handlers are kept.
    """
    root = logging.getLogger()
    for h in list(root.handlers):
        if h.get_name() == _STDLIB_HANDLER_NAME:
            root.removeHandler(h)
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_STDLIB_HANDLER_NAME)
    handler.setFormatter(stdlib_formatter(log_format))
    root.addHandler(handler)
    root.setLevel(_level_value(level))
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv = logging.getLogger(name)
        uv.handlers.clear()
        uv.propagate = True


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger bound to the module name.

        logger = get_logger(__name__)
        logger.info("balance_fetched", address=addr, balance="1000")
    Output (JSON): {"event_type": "balance_fetched", "address": "...", "balance": "1000",
    "timestamp": "...", "level": "info", "logger": "module.name"}
    """
    return structlog.get_logger(name).bind(logger=name)
