"""Process Executor — multi-process execution to escape the GIL.

Manifesto:
CPU-bound task actions cannot benefit from threads due to the GIL.
``ProcessExecutor`` uses ``ProcessPoolExecutor`` to distribute work across
cores while keeping the same handle semantics as ``ThreadExecutor``.

ARCHITECTURE
────────────
::

    ProcessExecutor(max_workers=4)
      ├── .start(action, args, ctx) ─ pickle + fork to worker process
      ├── .wait_any(handles)        ─ concurrent.futures.wait(FIRST_COMPLETED)
      ├── .fetch_result(handle)     ─ Future.result() (re-raises remote error)
      └── .shutdown()               ─ drain pool

    Actions must be top-level picklable functions (not closures or
    lambdas); their arguments and return values must pickle as well.
    A worker that dies takes its Future down with ``BrokenProcessPool``,
    which surfaces as a failed TaskResult like any other action error.

Tags:
    taskpool, execution, executor, process-pool, CPU-bound, multiprocessing
"""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor

from ._base import FutureExecutor


class ProcessExecutor(FutureExecutor):
    """``ProcessPoolExecutor``-based executor for CPU-bound actions.

    Parameters
    ----------
    max_workers : int | None
        Number of worker processes (None = ``os.cpu_count()``).
    """

    name = "process"

    def _create_pool(self) -> ProcessPoolExecutor:
        return ProcessPoolExecutor(max_workers=self._max_workers)
