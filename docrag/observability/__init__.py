"""
Observability helpers: logging configuration and structured log context.
"""

from docrag.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from docrag.observability.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "log_with_context",
    "log_exception_with_context",
    "safe_log_value",
]
