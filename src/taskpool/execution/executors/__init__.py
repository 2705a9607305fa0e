"""Executor adapters - how task actions run out of line.

All executors implement the same protocol, so the scheduler is independent
of whether actions run on threads or in worker processes.

Available executors:
- ThreadExecutor: ThreadPool-based (default; closures allowed)
- ProcessExecutor: ProcessPool for CPU-bound work (escapes the GIL)

Example:
    >>> from taskpool.execution.executors import create_executor, Executor
    >>> executor = create_executor("thread", max_workers=2)
    >>> isinstance(executor, Executor)
    True
    >>> executor.shutdown()
"""

from __future__ import annotations

import threading

from taskpool.core.errors import InvalidConfigError
from taskpool.core.settings import ExecutorBackend, get_settings

from .local import ThreadExecutor
from .process import ProcessExecutor
from .protocol import Executor, invoke_action

_EXECUTORS: dict[ExecutorBackend, type] = {
    ExecutorBackend.THREAD: ThreadExecutor,
    ExecutorBackend.PROCESS: ProcessExecutor,
}

_default_executor: Executor | None = None
_default_lock = threading.Lock()


def create_executor(backend: ExecutorBackend | str, max_workers: int | None = None) -> Executor:
    """Build a new executor for ``backend`` ("thread" or "process").

    Raises:
        InvalidConfigError: If ``backend`` is not a known executor backend
    """
    try:
        backend = ExecutorBackend(backend)
    except ValueError:
        raise InvalidConfigError("executor_backend", backend) from None
    return _EXECUTORS[backend](max_workers=max_workers)


def get_default_executor() -> Executor:
    """Process-wide executor used by tasks started outside a pool.

    Built once from ``TaskPoolSettings`` (``executor_backend``,
    ``executor_max_workers``).
    """
    global _default_executor
    with _default_lock:
        if _default_executor is None:
            settings = get_settings()
            _default_executor = create_executor(settings.executor_backend, settings.executor_max_workers)
        return _default_executor


def reset_default_executor() -> None:
    """Shut down and forget the default executor (primarily for testing)."""
    global _default_executor
    with _default_lock:
        executor, _default_executor = _default_executor, None
    if executor is not None:
        executor.shutdown(wait=True)


__all__ = [
    "Executor",
    "ThreadExecutor",
    "ProcessExecutor",
    "create_executor",
    "get_default_executor",
    "reset_default_executor",
    "invoke_action",
]
