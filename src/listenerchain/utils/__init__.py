"""
Utility helpers shared across listenerchain packages.
"""

from .logging import configure_logging, correlation_scope, get_logger, time_call
from .naming import camel_to_snake
from .redaction import redact_params, redact_value

__all__ = [
    "camel_to_snake",
    "configure_logging",
    "correlation_scope",
    "get_logger",
    "redact_params",
    "redact_value",
    "time_call",
]
