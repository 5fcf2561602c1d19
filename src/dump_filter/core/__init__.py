"""Core infrastructure: settings and logging."""

from dump_filter.core.config import Settings, get_settings
from dump_filter.core.logging import configure_logging, get_logger, log_context

__all__ = [
    "Settings",
    "configure_logging",
    "get_logger",
    "get_settings",
    "log_context",
]
