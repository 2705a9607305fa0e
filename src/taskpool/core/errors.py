"""
Structured error types for the task pool.

Every error raised by the engine itself extends ``TaskPoolError`` and carries
a category, a retryable flag, structured context and an optional chained
cause. Errors raised by *task actions* are never wrapped in this hierarchy:
they are captured verbatim in ``TaskResult.error`` and reported through the
pool's error event.

Manifesto:
    - **Typed Error Hierarchy:** Configuration, coordination and execution
      problems are distinguishable by type
    - **Fail loudly:** Engine invariant violations raise, they never
      silently continue
    - **Rich Context:** Errors carry the task name and execution id
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                     TaskPoolError                         │
        │        (category, retryable, context, cause)              │
        ├──────────────────────────────────────────────────────────┤
        │                                                           │
        │  ConfigError              CoordinationError               │
        │  (CONFIG)                 (INTERNAL)                      │
        │       │                                                   │
        │  MissingConfigError                                       │
        │  InvalidConfigError                                       │
        └──────────────────────────────────────────────────────────┘

Examples:
    Missing task field:

    >>> error = MissingConfigError("Name")
    >>> str(error)
    'Task configuration is missing required field: Name'
    >>> error.category
    <ErrorCategory.CONFIG: 'CONFIG'>

    Adding context:

    >>> error = CoordinationError("handle already tracked")
    >>> error.with_context(task_name="fetch", execution_id="abc-123")
    CoordinationError('handle already tracked', category=INTERNAL)

Tags:
    error-handling, exception-hierarchy, error-context, taskpool

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Attributes:
        CONFIG: Missing or invalid task/pool/settings values
        EXECUTION: A task action failed
        ORCHESTRATION: Scheduling-level failures
        INTERNAL: Engine invariant violations (bugs, misuse)
        UNKNOWN: Uncategorized errors
    """

    CONFIG = "CONFIG"
    EXECUTION = "EXECUTION"
    ORCHESTRATION = "ORCHESTRATION"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    The ``to_dict()`` method serializes all non-None fields for logging.

    Attributes:
        task_name: Name of the task involved
        execution_id: Identifier of the attempt involved
        retry_count: Retry count of the task at the time of the error
        metadata: Additional key-value pairs
    """

    task_name: str | None = None
    execution_id: str | None = None
    retry_count: int | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["task_name", "execution_id", "retry_count"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class TaskPoolError(Exception):
    """
    Base exception for all task pool errors.

    Subclasses set ``default_category`` and ``default_retryable`` class
    attributes to provide sensible defaults for their domain.

    Examples:
        >>> error = TaskPoolError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.retryable
        False

        >>> try:
        ...     raise OSError("broken pipe")
        ... except OSError as e:
        ...     error = TaskPoolError("executor failed", cause=e)
        >>> error.cause
        OSError('broken pipe')
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TaskPoolError:
        """
        Add context to this error (fluent API).

        Usage:
            raise CoordinationError("duplicate").with_context(task_name="fetch")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(TaskPoolError):
    """
    Configuration error.

    Never retryable - configuration must be fixed. Raised synchronously to
    the immediate caller, never routed through the pool's error event.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class MissingConfigError(ConfigError):
    """A required task field is missing."""

    def __init__(self, key: str, message: str | None = None, **kwargs: Any):
        self.key = key
        super().__init__(message or f"Task configuration is missing required field: {key}", **kwargs)


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# COORDINATION ERRORS
# =============================================================================


class CoordinationError(TaskPoolError):
    """
    The engine's own bookkeeping invariants were violated.

    Examples: waiting on an empty running set, tracking the same executor
    handle twice, starting a task that is still running. These are defects,
    not task failures.
    """

    default_category = ErrorCategory.INTERNAL
    default_retryable = False


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: BaseException) -> ErrorCategory:
    """Get the category of an error.

    Anything that is not a ``TaskPoolError`` came from a task action and is
    classified as an execution failure.
    """
    if isinstance(error, TaskPoolError):
        return error.category
    if isinstance(error, Exception):
        return ErrorCategory.EXECUTION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TaskPoolError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "CoordinationError",
    "categorize_error",
]
