"""Tests for RunningTaskSet — wait-any coordination."""

import threading

import pytest

from taskpool.core.errors import CoordinationError
from taskpool.execution.running import RunningTaskSet
from taskpool.execution.task import Task


def identity(value):
    return value


@pytest.fixture
def running():
    return RunningTaskSet()


def _cleanup(running, *tasks):
    for task in tasks:
        running.remove(task)
        task.join()
        task.teardown()


class TestAddRemove:
    def test_add_started_task(self, running, executor):
        task = Task("t", identity, (1,), executor=executor).start()
        running.add(task)
        assert running.count == 1
        assert task in running
        _cleanup(running, task)
        assert running.count == 0

    def test_add_unstarted_task_fails(self, running, executor):
        with pytest.raises(CoordinationError, match="not been started"):
            running.add(Task("t", identity, (1,), executor=executor))

    def test_double_add_fails(self, running, executor):
        task = Task("t", identity, (1,), executor=executor).start()
        running.add(task)
        with pytest.raises(CoordinationError, match="already tracked"):
            running.add(task)
        assert running.count == 1
        _cleanup(running, task)

    def test_remove_absent_is_noop(self, running, executor):
        running.remove(Task("t", identity, executor=executor))
        assert running.count == 0

    def test_tasks_in_admission_order(self, running, executor):
        tasks = [Task(f"t{i}", identity, (i,), executor=executor).start() for i in range(3)]
        for task in tasks:
            running.add(task)
        assert running.tasks() == tasks
        assert list(running) == tasks
        _cleanup(running, *tasks)


class TestWaitAny:
    def test_empty_set_fails(self, running):
        with pytest.raises(CoordinationError, match="empty"):
            running.wait_any()

    def test_returns_the_finished_task(self, running, executor):
        gate = threading.Event()
        slow = Task("slow", gate.wait, (5,), executor=executor).start()
        fast = Task("fast", identity, ("done",), executor=executor).start()
        running.add(slow)
        running.add(fast)

        assert running.wait_any() is fast

        gate.set()
        _cleanup(running, slow, fast)

    def test_ties_prefer_earliest_admitted(self, running, executor):
        tasks = [Task(f"t{i}", identity, (i,), executor=executor).start() for i in range(3)]
        for task in tasks:
            task.handle.result()
            running.add(task)

        assert running.wait_any() is tasks[0]
        _cleanup(running, *tasks)

    def test_wait_any_leaves_task_tracked(self, running, executor):
        task = Task("t", identity, (1,), executor=executor).start()
        running.add(task)
        assert running.wait_any() is task
        assert task in running
        _cleanup(running, task)


class TestMixedExecutors:
    def test_each_handle_waited_on_by_its_own_executor(self, running, executor, inline_executor):
        gate = threading.Event()
        slow = Task("slow", gate.wait, (5,), executor=executor).start()
        inline = Task("inline", identity, ("here",), executor=inline_executor).start()
        running.add(slow)
        running.add(inline)

        assert running.wait_any() is inline

        gate.set()
        _cleanup(running, inline)
        assert running.wait_any() is slow
        _cleanup(running, slow)

    def test_single_foreign_executor_used_directly(self, running, inline_executor):
        task = Task("inline", identity, (1,), executor=inline_executor).start()
        running.add(task)
        assert running.wait_any() is task
        assert inline_executor.wait_calls == 1
        _cleanup(running, task)
