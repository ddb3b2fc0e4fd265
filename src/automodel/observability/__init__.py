"""Observability module for automodel.

Structured logging via structlog: configure_logging, get_logger, bound_context.
"""

from automodel.observability.logging import (
    LoggingConfig,
    LogMode,
    Verbosity,
    apply_verbosity,
    bound_context,
    configure_logging,
    get_log_level,
    get_logger,
)

__all__ = [
    "LogMode",
    "LoggingConfig",
    "Verbosity",
    "apply_verbosity",
    "bound_context",
    "configure_logging",
    "get_log_level",
    "get_logger",
]
