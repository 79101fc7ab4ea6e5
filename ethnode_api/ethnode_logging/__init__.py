"""
Structured logging for Ethnode API.

JSON logs with timestamp, event_type, request id and trace ids.
Use get_logger() in all modules.
"""

from ethnode_api.ethnode_logging.logger import (
    add_trace_context,
    configure_stdlib_logging,
    get_logger,
    stdlib_formatter,
)

__all__ = ["add_trace_context", "configure_stdlib_logging", "get_logger", "stdlib_formatter"]
