"""Task — a named unit of work and the outcome of one attempt.

ARCHITECTURE
────────────
::

    Task(name, action, arguments, max_retry)
      ├── .start()     ─ validate, build ExecutionContext, executor.start()
      ├── .join()      ─ wait for the handle, return a TaskResult (never raises)
      └── .teardown()  ─ executor.release(), clear the handle

    Every start() must be followed by exactly one join() and one
    teardown(), on every path. ``with task.start() as t:`` guarantees the
    teardown.

    TaskResult
      ├── task, execution_id
      ├── success
      └── result | error   (exactly one is meaningful)

Related modules:
    context.py   — ExecutionContext built by start()
    executors/   — what start()/join()/teardown() delegate to
    pool.py      — TaskPool drives the lifecycle for queued tasks

Tags:
    taskpool, execution, task, lifecycle
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from taskpool.core.errors import CoordinationError, MissingConfigError, categorize_error
from taskpool.core.logging import get_logger

from .context import ExecutionContext

if TYPE_CHECKING:
    from .executors.protocol import Executor

logger = get_logger(__name__)


@dataclass(frozen=True)
class TaskResult:
    """Outcome of one execution attempt of a task.

    Build with :meth:`ok` or :meth:`failed` rather than directly, so that
    ``result`` is only set on success and ``error`` only on failure.
    """

    task: Task
    execution_id: str | None
    success: bool
    result: Any = None
    error: BaseException | None = None

    @classmethod
    def ok(cls, task: Task, execution_id: str | None, result: Any) -> TaskResult:
        return cls(task=task, execution_id=execution_id, success=True, result=result)

    @classmethod
    def failed(cls, task: Task, execution_id: str | None, error: BaseException) -> TaskResult:
        return cls(task=task, execution_id=execution_id, success=False, error=error)

    @property
    def task_name(self) -> str:
        return self.task.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for logging."""
        data: dict[str, Any] = {
            "task": self.task.name,
            "execution_id": self.execution_id,
            "success": self.success,
            "retry_count": self.task.retry_count,
        }
        if self.success:
            data["result"] = self.result
        else:
            data["error"] = repr(self.error)
            data["error_type"] = type(self.error).__name__
            data["category"] = categorize_error(self.error).value
        return data


class Task:
    """A named unit of work bound to an action and its arguments.

    Args:
        name: Display name; required, not necessarily unique
        action: Callable run by the executor. If it declares a ``context``
            parameter it receives the ExecutionContext as ``context=``.
        arguments: Positional arguments for ``action``
        max_retry: Retry limit (<0 unlimited, 0 single attempt)
        executor: Executor to run on; the pool binds its own when None,
            and a standalone start() falls back to the default executor

    Example:
        >>> task = Task("double", lambda x: x * 2, (21,))
        >>> with task.start() as t:
        ...     t.join().result
        42
    """

    def __init__(
        self,
        name: str,
        action: Callable[..., Any] | None,
        arguments: Sequence[Any] = (),
        *,
        max_retry: int = 0,
        executor: Executor | None = None,
    ) -> None:
        self.name = name
        self.action = action
        self.arguments: tuple[Any, ...] = tuple(arguments)
        self.max_retry = max_retry
        self.retry_count = 0
        self.executor = executor

        self.handle: Any = None
        self.execution_id: str | None = None
        self.context: ExecutionContext | None = None
        self._handle_executor: Executor | None = None

    def __repr__(self) -> str:
        return f"Task(name={self.name!r}, retry_count={self.retry_count}, max_retry={self.max_retry})"

    @property
    def is_running(self) -> bool:
        """True between start() and teardown()."""
        return self.handle is not None

    @property
    def handle_executor(self) -> Executor | None:
        """The executor that issued the live handle, if any."""
        return self._handle_executor

    def _validate(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise MissingConfigError("Name")
        if self.action is None or not callable(self.action):
            raise MissingConfigError("Action").with_context(task_name=self.name)

    def start(self) -> Task:
        """Begin executing the action; returns ``self`` for ``start().join()``.

        Raises:
            MissingConfigError: If ``name`` is empty or ``action`` is missing
            CoordinationError: If the task is already running
        """
        self._validate()
        if self.handle is not None:
            raise CoordinationError("Task is already running").with_context(
                task_name=self.name, execution_id=self.execution_id
            )

        executor = self.executor
        if executor is None:
            from .executors import get_default_executor

            executor = get_default_executor()

        context = ExecutionContext.create(self.name, self.retry_count, self.max_retry)
        self.handle = executor.start(self.action, self.arguments, context)
        self._handle_executor = executor
        self.execution_id = context.execution_id
        self.context = context

        logger.debug(
            "task.started",
            task=self.name,
            execution_id=context.execution_id,
            attempt=context.attempt,
        )
        return self

    def join(self) -> TaskResult:
        """Block until the action finishes and report its outcome.

        Never raises for action failures: the exception, including
        ``SystemExit`` from an action that exits, is returned inside a failed
        TaskResult. ``KeyboardInterrupt`` is the one exception that
        propagates, so Ctrl-C still stops a draining run. Call exactly once
        per start().
        """
        if self.handle is None or self._handle_executor is None:
            error = CoordinationError("join() called on a task that was not started").with_context(
                task_name=self.name
            )
            return TaskResult.failed(self, self.execution_id, error)

        try:
            value = self._handle_executor.fetch_result(self.handle)
        except KeyboardInterrupt:
            raise
        except BaseException as exc:
            logger.debug(
                "task.failed",
                task=self.name,
                execution_id=self.execution_id,
                error=repr(exc),
            )
            return TaskResult.failed(self, self.execution_id, exc)

        logger.debug("task.completed", task=self.name, execution_id=self.execution_id)
        return TaskResult.ok(self, self.execution_id, value)

    def teardown(self) -> None:
        """Release the executor handle. Safe to call when already released."""
        handle, executor = self.handle, self._handle_executor
        self.handle = None
        self._handle_executor = None
        if handle is not None and executor is not None:
            executor.release(handle)

    def __enter__(self) -> Task:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.teardown()
