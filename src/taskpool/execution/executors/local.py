"""Thread Executor — ThreadPool-based concurrent execution.

Manifesto:
Most task actions are I/O-bound or cheap enough that threads give real
concurrency without pickling constraints. ``ThreadExecutor`` runs each
action on a ``ThreadPoolExecutor`` worker and hands back the ``Future`` as
the executor handle. Closures and lambdas are fine here.

ARCHITECTURE
────────────
::

    ThreadExecutor(max_workers=4)
      ├── .start(action, args, ctx) ─ submit to ThreadPool
      ├── .wait_any(handles)        ─ concurrent.futures.wait(FIRST_COMPLETED)
      ├── .fetch_result(handle)     ─ Future.result()
      ├── .release(handle)          ─ forget the Future
      └── .shutdown()               ─ drain pool

Related modules:
    protocol.py — Executor protocol
    process.py  — ProcessPool for CPU-bound work

Example::

    with ThreadExecutor(max_workers=4) as executor:
        task = Task("double", lambda x: x * 2, (21,), executor=executor)
        result = task.start().join()
        task.teardown()

Tags:
    taskpool, execution, executor, local, thread-pool
"""

from concurrent.futures import ThreadPoolExecutor

from ._base import FutureExecutor


class ThreadExecutor(FutureExecutor):
    """ThreadPoolExecutor-based executor.

    Args:
        max_workers: ThreadPool size (None = ``ThreadPoolExecutor`` default).
            A pool that creates its own executor sizes it to its slot count.
    """

    name = "thread"

    def _create_pool(self) -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="taskpool")
