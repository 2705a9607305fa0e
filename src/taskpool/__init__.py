"""
taskpool - bounded-concurrency task scheduling.

Run independent tasks on a fixed number of slots, get told about every
success and failure, retry failures up to a limit, and let handlers queue
follow-up work inside the same run.

Examples:
    >>> from taskpool import TaskPool
    >>> results = []
    >>> with TaskPool(num_slots=2) as pool:
    ...     _ = pool.on_task_complete.add(lambda r: results.append(r.result))
    ...     for n in (1, 2, 3):
    ...         _ = pool.add(lambda x: x * 2, n)
    ...     _ = pool.run()
    >>> sorted(results)
    [2, 4, 6]
"""

from taskpool.core.errors import (
    ConfigError,
    CoordinationError,
    MissingConfigError,
    TaskPoolError,
)
from taskpool.core.logging import configure_from_settings, configure_logging, get_logger
from taskpool.core.settings import TaskPoolSettings, get_settings
from taskpool.execution import (
    NO_RETRY,
    UNLIMITED_RETRIES,
    EventManager,
    ExecutionContext,
    Executor,
    ProcessExecutor,
    RunningTaskSet,
    RunSummary,
    Task,
    TaskPool,
    TaskResult,
    ThreadExecutor,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "CoordinationError",
    "EventManager",
    "ExecutionContext",
    "Executor",
    "MissingConfigError",
    "NO_RETRY",
    "ProcessExecutor",
    "RunSummary",
    "RunningTaskSet",
    "Task",
    "TaskPool",
    "TaskPoolError",
    "TaskPoolSettings",
    "TaskResult",
    "ThreadExecutor",
    "UNLIMITED_RETRIES",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "get_settings",
]
