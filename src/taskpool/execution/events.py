"""EventManager — ordered, deduplicated callback registry.

WHY
───
The pool reports completions and errors to any number of subscribers.
Handlers must fire in the order they were registered (tests and callers
depend on it), and registering the same handler twice must not make it
fire twice.

ARCHITECTURE
────────────
::

    EventManager
      ├── .add(handler)     ─ insert if absent (identity), keep order
      ├── .remove(handler)  ─ drop if present, else no-op
      └── .invoke(payload)  ─ call every handler in order, same thread

    Handler errors are NOT caught: a failing handler aborts invoke() and
    propagates to whoever triggered the event.

Related modules:
    pool.py — TaskPool.on_task_complete / on_task_error
"""

from collections.abc import Callable, Iterator
from typing import Any

Handler = Callable[[Any], Any]


class EventManager:
    """Insertion-ordered set of handlers keyed by identity.

    Example:
        >>> log = []
        >>> events = EventManager()
        >>> handler = events.add(lambda x: log.append(x))
        >>> events.add(handler) is handler
        True
        >>> events.count
        1
        >>> events.invoke("done")
        >>> log
        ['done']
    """

    def __init__(self, name: str = "event") -> None:
        self.name = name
        # id(handler) -> handler; dicts keep insertion order
        self._handlers: dict[int, Handler] = {}

    def __repr__(self) -> str:
        return f"EventManager(name={self.name!r}, count={self.count})"

    @property
    def count(self) -> int:
        return len(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, handler: object) -> bool:
        return self._handlers.get(id(handler)) is handler

    def __iter__(self) -> Iterator[Handler]:
        return iter(list(self._handlers.values()))

    def add(self, handler: Handler) -> Handler:
        """Register ``handler`` unless it is already registered.

        Returns the handler, so ``add`` doubles as a decorator.
        """
        if not callable(handler):
            raise TypeError(f"{self.name} handler must be callable, got {type(handler).__name__}")
        self._handlers.setdefault(id(handler), handler)
        return handler

    def remove(self, handler: Handler) -> None:
        """Unregister ``handler``; no-op if it was never added."""
        if handler in self:
            del self._handlers[id(handler)]

    def clear(self) -> None:
        self._handlers.clear()

    def invoke(self, payload: Any) -> None:
        """Call every handler with ``payload`` in registration order."""
        for handler in list(self._handlers.values()):
            handler(payload)
