"""Execution context handed to a running task action.

Every ``Task.start()`` builds a fresh, immutable ``ExecutionContext``. It is
passed to the action as an explicit ``context=`` argument (when the action
declares one), so downstream code never depends on ambient globals.

.. code-block:: text

    ExecutionContext
    ├── .task_name          → name of the task
    ├── .execution_id       → fresh UUID per start()
    ├── .retry_count        → retries already spent
    ├── .max_retry          → limit (<0 unlimited)
    ├── .started_at         → UTC timestamp
    ├── .attempt            → retry_count + 1
    └── .retries_remaining  → None when unlimited

Tags:
    taskpool, execution, context, immutable-state
"""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


def utcnow() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(UTC)


def new_execution_id() -> str:
    """Mint a unique execution identifier."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ExecutionContext:
    """Read-only snapshot of a task at the moment it was started."""

    task_name: str
    execution_id: str
    retry_count: int
    max_retry: int
    started_at: datetime = field(default_factory=utcnow)

    @classmethod
    def create(cls, task_name: str, retry_count: int, max_retry: int) -> "ExecutionContext":
        """Build a context with a newly generated execution id."""
        return cls(
            task_name=task_name,
            execution_id=new_execution_id(),
            retry_count=retry_count,
            max_retry=max_retry,
        )

    @property
    def attempt(self) -> int:
        """One-based attempt number."""
        return self.retry_count + 1

    @property
    def retries_remaining(self) -> int | None:
        if self.max_retry < 0:
            return None
        return max(self.max_retry - self.retry_count, 0)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for logging."""
        return {
            "task_name": self.task_name,
            "execution_id": self.execution_id,
            "retry_count": self.retry_count,
            "max_retry": self.max_retry,
            "started_at": self.started_at.isoformat(),
        }
