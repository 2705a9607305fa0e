"""Shared plumbing for executors whose handles are ``concurrent.futures.Future``.

Both the thread and the process executor hand out plain ``Future`` objects
as handles, so completion waiting, result retrieval and release are the same
for both; subclasses only decide which pool runs the action.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Collection, Sequence
from concurrent.futures import FIRST_COMPLETED, Executor as PoolExecutor, Future, wait
from typing import Any

from taskpool.core.errors import CoordinationError
from taskpool.core.logging import get_logger

from ..context import ExecutionContext
from .protocol import invoke_action

logger = get_logger(__name__)


class FutureExecutor:
    """Base for pool-backed executors.

    Subclasses set ``name`` and provide a ``concurrent.futures`` pool via
    ``_create_pool``. The pool is created lazily so constructing an executor
    (for example as a settings default) costs nothing until work arrives.
    """

    name = "future"

    def __init__(self, max_workers: int | None = None) -> None:
        self._max_workers = max_workers
        self._pool: PoolExecutor | None = None
        self._pool_lock = threading.Lock()
        self._active: set[Future] = set()
        self._closed = False

    def _create_pool(self) -> PoolExecutor:
        raise NotImplementedError

    @property
    def pool(self) -> PoolExecutor:
        with self._pool_lock:
            if self._closed:
                raise CoordinationError(f"{self.name} executor has been shut down")
            if self._pool is None:
                self._pool = self._create_pool()
            return self._pool

    @property
    def max_workers(self) -> int | None:
        return self._max_workers

    @property
    def active_count(self) -> int:
        """Handles started and not yet released."""
        return len(self._active)

    # ── Executor protocol ────────────────────────────────────────────

    def start(self, action: Callable[..., Any], arguments: Sequence[Any], context: ExecutionContext) -> Future:
        future = self.pool.submit(invoke_action, action, tuple(arguments), context)
        self._active.add(future)
        logger.debug(
            f"{self.name}_executor.started",
            task=context.task_name,
            execution_id=context.execution_id,
        )
        return future

    def wait_any(self, handles: Collection[Future], timeout: float | None = None) -> Future | None:
        if not handles:
            raise CoordinationError("wait_any called with no handles")
        done, _ = wait(handles, timeout=timeout, return_when=FIRST_COMPLETED)
        if not done:
            return None
        # Prefer the caller's ordering among handles that finished together.
        for handle in handles:
            if handle in done:
                return handle
        raise CoordinationError("wait_any returned without a completed handle")

    def fetch_result(self, handle: Future) -> Any:
        return handle.result()

    def release(self, handle: Future | None) -> None:
        if handle is None:
            return
        self._active.discard(handle)

    # ── Lifecycle ────────────────────────────────────────────────────

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the underlying pool.

        Args:
            wait: Block until all running actions finish.
        """
        with self._pool_lock:
            self._closed = True
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=wait)
        self._active.clear()
        logger.debug(f"{self.name}_executor.shutdown", wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(wait=True)
