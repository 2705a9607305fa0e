"""Scheduling engine: tasks, events, the running set and the pool."""

from .context import ExecutionContext
from .events import EventManager
from .executors import (
    Executor,
    ProcessExecutor,
    ThreadExecutor,
    create_executor,
    get_default_executor,
)
from .pool import RunSummary, TaskPool, generate_task_name
from .retry import NO_RETRY, UNLIMITED_RETRIES, should_retry
from .running import RunningTaskSet
from .task import Task, TaskResult

__all__ = [
    "EventManager",
    "ExecutionContext",
    "Executor",
    "NO_RETRY",
    "ProcessExecutor",
    "RunSummary",
    "RunningTaskSet",
    "Task",
    "TaskPool",
    "TaskResult",
    "ThreadExecutor",
    "UNLIMITED_RETRIES",
    "create_executor",
    "generate_task_name",
    "get_default_executor",
    "should_retry",
]
