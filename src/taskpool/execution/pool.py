"""TaskPool — bounded-concurrency scheduler with retries and dynamic tasks.

Manifesto:
Callers queue independent tasks, register completion/error handlers, and
call ``run()``. The pool keeps at most ``num_slots`` tasks in flight,
refills a slot as soon as (and only when) another task finishes, reports
every attempt's outcome, and re-queues failures until their retry limit is
spent. Handlers may ``add()`` more tasks while the run is draining; those
are picked up by the same ``run()`` call.

ARCHITECTURE
────────────
::

    add() ──► pending deque (FIFO) ──admit──► RunningTaskSet ──wait_any──┐
                  ▲                           (≤ num_slots)              │
                  │                                                      ▼
                  │  retry (tail)           join() ──► TaskResult
                  └──────────────── failed ◄─────┴────► success
                                      │                    │
                               on_task_error        on_task_complete
                                      └──── remove + teardown ────┘

    run() loops while queue_count + running_count > 0:
      1. admit   — start queued tasks until every slot is busy
      2. wait    — block until any running task finishes
      3. resolve — join, dispatch to on_task_complete / on_task_error
      4. cleanup — remove from running set, teardown (always)
      5. retry   — failed + should_retry → retry_count += 1, append to tail

The queue and running set are only touched by the thread calling
``run()``; executors run actions elsewhere and only signal completion.
Handler exceptions propagate out of ``run()`` after the resolved task has
been torn down; tasks still in flight are left running.

Example::

    with TaskPool(num_slots=4) as pool:
        pool.on_task_complete.add(lambda r: print(r.task.name, r.result))
        pool.on_task_error.add(lambda r: print(r.task.name, "failed", r.error))
        for n in range(10):
            pool.add(double, n, max_retry=2)
        summary = pool.run()

Tags:
    taskpool, scheduler, bounded-concurrency, retry, events
"""

from __future__ import annotations

import time
import uuid
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from taskpool.core.errors import CoordinationError
from taskpool.core.logging import LogContext, configure_from_settings, get_logger
from taskpool.core.settings import get_settings

from .events import EventManager
from .executors import create_executor
from .executors.protocol import Executor
from .retry import should_retry
from .running import RunningTaskSet
from .task import Task, TaskResult

logger = get_logger(__name__)


def generate_task_name() -> str:
    """Display name for tasks added without one. Not guaranteed unique."""
    return f"task-{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class RunSummary:
    """Attempt counts for a single ``run()`` call."""

    run_id: str
    started: int = 0
    completed: int = 0
    failed: int = 0
    retried: int = 0
    dropped: int = 0
    peak_running: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "started": self.started,
            "completed": self.completed,
            "failed": self.failed,
            "retried": self.retried,
            "dropped": self.dropped,
            "peak_running": self.peak_running,
            "duration_seconds": round(self.duration_seconds, 6),
        }


class _RunStats:
    """Mutable counters behind a RunSummary."""

    def __init__(self) -> None:
        self.started = 0
        self.completed = 0
        self.failed = 0
        self.retried = 0
        self.dropped = 0
        self.peak_running = 0

    def summary(self, run_id: str, duration: float) -> RunSummary:
        return RunSummary(
            run_id=run_id,
            started=self.started,
            completed=self.completed,
            failed=self.failed,
            retried=self.retried,
            dropped=self.dropped,
            peak_running=self.peak_running,
            duration_seconds=duration,
        )


class TaskPool:
    """Runs queued tasks with at most ``num_slots`` in flight.

    Args:
        num_slots: Concurrent slots; values below 1 are clamped to 1.
            Defaults to ``TaskPoolSettings.num_slots``.
        executor: Executor that runs task actions. When omitted the pool
            creates one from settings (sized to ``num_slots`` unless
            ``executor_max_workers`` is set) and shuts it down on close().
        max_retry: Retry limit for tasks added by action. Defaults to
            ``TaskPoolSettings.max_retry``.
    """

    def __init__(
        self,
        num_slots: int | None = None,
        executor: Executor | None = None,
        *,
        max_retry: int | None = None,
    ) -> None:
        settings = get_settings()
        configure_from_settings(settings)
        requested = settings.num_slots if num_slots is None else num_slots
        self._num_slots = max(int(requested), 1)
        self.max_retry = settings.max_retry if max_retry is None else max_retry

        self._owns_executor = executor is None
        if executor is None:
            executor = create_executor(
                settings.executor_backend,
                settings.executor_max_workers or self._num_slots,
            )
        self._executor = executor

        self._queue: deque[Task] = deque()
        self._running = RunningTaskSet()
        self.on_task_complete = EventManager("on_task_complete")
        self.on_task_error = EventManager("on_task_error")

    def __repr__(self) -> str:
        return (
            f"TaskPool(num_slots={self._num_slots}, queued={self.queue_count}, "
            f"running={self.running_count})"
        )

    # ── Counters ─────────────────────────────────────────────────────

    @property
    def num_slots(self) -> int:
        return self._num_slots

    @property
    def executor(self) -> Executor:
        return self._executor

    @property
    def queue_count(self) -> int:
        return len(self._queue)

    @property
    def running_count(self) -> int:
        return self._running.count

    @property
    def count(self) -> int:
        """Queued plus running tasks."""
        return self.queue_count + self.running_count

    # ── Submission ───────────────────────────────────────────────────

    def add(
        self,
        task_or_action: Task | Callable[..., Any],
        *arguments: Any,
        name: str | None = None,
        max_retry: int | None = None,
    ) -> Task:
        """Queue a task at the tail of the pending queue.

        Accepts either a ready-made ``Task`` or an action plus its positional
        arguments; in the latter form ``name`` is generated when omitted and
        ``max_retry`` defaults to the pool's. Safe to call from handlers
        during ``run()``.

        Raises:
            TypeError: If a Task is combined with arguments, name or max_retry
            CoordinationError: If the Task is already queued or running
        """
        if isinstance(task_or_action, Task):
            if arguments or name is not None or max_retry is not None:
                raise TypeError("add() takes no arguments, name or max_retry when given a Task")
            task = task_or_action
        else:
            task = Task(
                name if name is not None else generate_task_name(),
                task_or_action,
                arguments,
                max_retry=self.max_retry if max_retry is None else max_retry,
            )
        if task.is_running or any(queued is task for queued in self._queue):
            raise CoordinationError("Task is already queued or running").with_context(
                task_name=task.name, execution_id=task.execution_id
            )
        if task.executor is None:
            task.executor = self._executor
        self._queue.append(task)
        logger.debug("task_pool.task_added", task=task.name, queued=len(self._queue))
        return task

    # ── Run loop ─────────────────────────────────────────────────────

    def run(self) -> RunSummary:
        """Drain the queue and the running set, blocking until both are empty.

        Returns:
            RunSummary with attempt counts for this call

        Raises:
            MissingConfigError: If a queued task lacks a name or action
            Exception: Whatever a completion/error handler raised
        """
        run_id = uuid.uuid4().hex[:12]
        stats = _RunStats()
        started_at = time.monotonic()

        with LogContext(run_id=run_id):
            logger.info(
                "task_pool.run_started",
                num_slots=self._num_slots,
                queued=self.queue_count,
                running=self.running_count,
            )
            try:
                while self.count > 0:
                    self._admit(stats)
                    self._resolve_next(stats)
            except Exception as exc:
                logger.warning(
                    "task_pool.run_aborted",
                    error=repr(exc),
                    queued=self.queue_count,
                    running=self.running_count,
                )
                raise

            summary = stats.summary(run_id, time.monotonic() - started_at)
            logger.info("task_pool.run_finished", **summary.to_dict())
        return summary

    def _admit(self, stats: _RunStats) -> None:
        while self._queue and self._running.count < self._num_slots:
            task = self._queue.popleft()
            task.start()
            self._running.add(task)
            stats.started += 1
            stats.peak_running = max(stats.peak_running, self._running.count)

    def _resolve_next(self, stats: _RunStats) -> None:
        task = self._running.wait_any()
        try:
            result = task.join()
            self._dispatch(result, stats)
        finally:
            self._running.remove(task)
            task.teardown()

        if not result.success:
            self._apply_retry_policy(task, stats)

    def _dispatch(self, result: TaskResult, stats: _RunStats) -> None:
        if result.success:
            stats.completed += 1
            self.on_task_complete.invoke(result)
        else:
            stats.failed += 1
            logger.info(
                "task_pool.task_failed",
                task=result.task.name,
                execution_id=result.execution_id,
                retry_count=result.task.retry_count,
                error=repr(result.error),
            )
            self.on_task_error.invoke(result)

    def _apply_retry_policy(self, task: Task, stats: _RunStats) -> None:
        if should_retry(task.retry_count, task.max_retry):
            task.retry_count += 1
            self._queue.append(task)
            stats.retried += 1
            logger.debug(
                "task_pool.retry_scheduled",
                task=task.name,
                retry_count=task.retry_count,
                max_retry=task.max_retry,
            )
        else:
            stats.dropped += 1
            logger.info(
                "task_pool.task_dropped",
                task=task.name,
                retry_count=task.retry_count,
                max_retry=task.max_retry,
            )

    # ── Lifecycle ────────────────────────────────────────────────────

    def close(self, wait: bool = True) -> None:
        """Shut down the executor if this pool created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> TaskPool:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close(wait=True)
