"""Executor Protocol — the single backend interface.

Manifesto:
Regardless of how a task's action actually runs (threads, processes), the
``Task`` and ``RunningTaskSet`` need a uniform interface. ``Executor`` is a
``typing.Protocol`` — any object with the right methods satisfies it, no
base class required.

ARCHITECTURE
────────────
::

    Executor (Protocol)
      ├── .start(action, arguments, context) ─ begin work, return a handle
      ├── .wait_any(handles, timeout)        ─ block until one finishes
      ├── .fetch_result(handle)              ─ value, or re-raise the failure
      ├── .release(handle)                   ─ free resources (idempotent)
      └── .shutdown(wait)                    ─ drain the backend

    Implementations:
      ThreadExecutor   ─ ThreadPool   (I/O-bound, closures allowed)
      ProcessExecutor  ─ ProcessPool  (CPU-bound, picklable actions only)

Related modules:
    task.py    — Task.start/join/teardown drive an executor
    running.py — RunningTaskSet.wait_any delegates here

Tags:
    taskpool, execution, executor, protocol, interface
"""

import inspect
from collections.abc import Callable, Collection, Sequence
from typing import Any, Protocol, runtime_checkable

from ..context import ExecutionContext


@runtime_checkable
class Executor(Protocol):
    """Executor adapter - how a task's action gets run out of line.

    Handles are opaque to callers but must be hashable by identity; the
    running set keys tasks by them.
    """

    def start(self, action: Callable[..., Any], arguments: Sequence[Any], context: ExecutionContext) -> Any:
        """Begin executing ``action``. Must not block past initiation.

        Returns:
            handle: Opaque reference to the in-flight execution
        """
        ...

    def wait_any(self, handles: Collection[Any], timeout: float | None = None) -> Any | None:
        """Block until at least one of ``handles`` has completed.

        With a ``timeout`` (seconds, 0 to poll) the call gives up and returns
        ``None`` when nothing finished in time.

        Returns:
            One completed handle

        Raises:
            CoordinationError: If ``handles`` is empty
        """
        ...

    def fetch_result(self, handle: Any) -> Any:
        """Return the action's value, or raise the exception it raised."""
        ...

    def release(self, handle: Any) -> None:
        """Free resources held for ``handle``. Idempotent."""
        ...

    def shutdown(self, wait: bool = True) -> None:
        """Shut the backend down."""
        ...


def accepts_context(action: Callable[..., Any]) -> bool:
    """True if ``action`` declares a parameter named ``context``.

    A bare ``**kwargs`` does not count: such callables often forward their
    keywords to an API that would reject ``context``.
    """
    try:
        signature = inspect.signature(action)
    except (TypeError, ValueError):
        return False
    for param in signature.parameters.values():
        if param.name == "context" and param.kind in (
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.KEYWORD_ONLY,
        ):
            return True
    return False


def invoke_action(action: Callable[..., Any], arguments: Sequence[Any], context: ExecutionContext) -> Any:
    """Call ``action`` with its positional arguments.

    The execution context is supplied as ``context=`` only to actions that
    ask for it. This function is top-level so process pools can pickle it.
    """
    if accepts_context(action):
        return action(*arguments, context=context)
    return action(*arguments)
