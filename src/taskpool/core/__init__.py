"""Cross-cutting pieces shared by the task pool: errors, logging, settings."""

from taskpool.core.errors import (
    ConfigError,
    CoordinationError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    MissingConfigError,
    TaskPoolError,
    categorize_error,
)
from taskpool.core.logging import configure_from_settings, configure_logging, get_logger

__all__ = [
    "ConfigError",
    "CoordinationError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidConfigError",
    "MissingConfigError",
    "TaskPoolError",
    "categorize_error",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
]
