"""RunningTaskSet — the tasks currently holding a live executor handle.

ARCHITECTURE
────────────
::

    RunningTaskSet()
      ├── .add(task)     ─ track by handle; rejects unstarted/duplicate
      ├── .remove(task)  ─ untrack; no-op if absent
      └── .wait_any()    ─ block until one tracked task finishes

    handle ──► Task   (insertion ordered)

Each handle is waited on by the executor that issued it. When every running
task shares one executor, wait_any() blocks in that executor directly and
passes handles in admission order, so among tasks that finished together the
earliest admitted one is returned. Tasks spread over several executors are
polled group by group, with a short blocking wait on the earliest group
between rounds.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from taskpool.core.errors import CoordinationError

from .task import Task

if TYPE_CHECKING:
    from .executors.protocol import Executor

# Seconds the first executor group may block per polling round.
POLL_INTERVAL = 0.01


class RunningTaskSet:
    """Mapping from executor handle to the Task that owns it."""

    def __init__(self) -> None:
        self._tasks: dict[Any, Task] = {}

    @property
    def count(self) -> int:
        return len(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task: object) -> bool:
        handle = getattr(task, "handle", None)
        return handle is not None and self._tasks.get(handle) is task

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks.values()))

    def tasks(self) -> list[Task]:
        return list(self._tasks.values())

    def add(self, task: Task) -> None:
        """Track a started task.

        Raises:
            CoordinationError: If the task has no handle or its handle is
                already tracked
        """
        if task.handle is None:
            raise CoordinationError("Cannot track a task that has not been started").with_context(
                task_name=task.name
            )
        if task.handle in self._tasks:
            raise CoordinationError("Task handle is already tracked").with_context(
                task_name=task.name, execution_id=task.execution_id
            )
        self._tasks[task.handle] = task

    def remove(self, task: Task) -> None:
        if task.handle is None:
            return
        if self._tasks.get(task.handle) is task:
            del self._tasks[task.handle]

    def _groups(self) -> list[tuple[Executor, list[Any]]]:
        groups: dict[int, tuple[Executor, list[Any]]] = {}
        for handle, task in self._tasks.items():
            executor = task.handle_executor
            if executor is None:
                raise CoordinationError("Tracked task has no executor").with_context(
                    task_name=task.name, execution_id=task.execution_id
                )
            groups.setdefault(id(executor), (executor, []))[1].append(handle)
        return list(groups.values())

    def wait_any(self) -> Task:
        """Block until a tracked task completes and return it.

        Raises:
            CoordinationError: If nothing is running
        """
        if not self._tasks:
            raise CoordinationError("wait_any called on an empty running set")

        groups = self._groups()
        if len(groups) == 1:
            executor, handles = groups[0]
            return self._owner(executor.wait_any(handles))

        while True:
            for executor, handles in groups:
                handle = executor.wait_any(handles, timeout=0)
                if handle is not None:
                    return self._owner(handle)
            executor, handles = groups[0]
            handle = executor.wait_any(handles, timeout=POLL_INTERVAL)
            if handle is not None:
                return self._owner(handle)

    def _owner(self, handle: Any) -> Task:
        try:
            return self._tasks[handle]
        except KeyError:
            raise CoordinationError("Executor returned a handle that is not tracked") from None
