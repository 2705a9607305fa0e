"""
Shared pytest fixtures and configuration for taskpool tests.

This module provides:
- Settings cache / default executor cleanup for test isolation
- A thread executor fixture that is always shut down
- Small task actions reused across test modules

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments.
"""

import os
import sys
import threading
from pathlib import Path
from typing import Generator

import pytest

# Ensure taskpool package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from taskpool.core.settings import clear_settings_cache
from taskpool.execution.executors import ThreadExecutor, reset_default_executor
from taskpool.execution.executors.protocol import invoke_action


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location and name."""
    for item in items:
        if "integration" in item.name or "process" in item.name:
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings_fixture(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Start every test from default settings and no default executor.

    TASKPOOL_* variables from the developer's shell would otherwise leak
    into the defaults the pool picks up.
    """
    for key in list(os.environ):
        if key.startswith("TASKPOOL_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    reset_default_executor()
    clear_settings_cache()


@pytest.fixture
def executor() -> Generator[ThreadExecutor, None, None]:
    """Thread executor with a few workers, shut down after the test."""
    ex = ThreadExecutor(max_workers=4)
    yield ex
    ex.shutdown(wait=True)


# =============================================================================
# Sample Actions
# =============================================================================


class FlakyAction:
    """Fails the first ``failures`` calls, then returns ``value``."""

    def __init__(self, failures: int, value: object = "ok"):
        self.failures = failures
        self.value = value
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self) -> object:
        with self._lock:
            self.calls += 1
            call = self.calls
        if call <= self.failures:
            raise RuntimeError(f"attempt {call} failed")
        return self.value


class ConcurrencyTracker:
    """Action wrapper that records how many calls overlap."""

    def __init__(self, hold: float = 0.02):
        self.hold = hold
        self.current = 0
        self.peak = 0
        self._lock = threading.Lock()

    def __call__(self, value: int) -> int:
        import time

        with self._lock:
            self.current += 1
            self.peak = max(self.peak, self.current)
        try:
            time.sleep(self.hold)
            return value
        finally:
            with self._lock:
                self.current -= 1


class InlineHandle:
    """Handle issued by InlineExecutor; deliberately not a Future."""

    def __init__(self, value: object = None, error: BaseException | None = None):
        self.value = value
        self.error = error


class InlineExecutor:
    """Executor that runs actions synchronously inside start().

    Its handles are plain objects, and wait_any() refuses handles it did not
    issue, so it catches callers that mix up executors.
    """

    def __init__(self):
        self.issued: set[InlineHandle] = set()
        self.wait_calls = 0

    def start(self, action, arguments, context):
        try:
            handle = InlineHandle(value=invoke_action(action, arguments, context))
        except Exception as exc:
            handle = InlineHandle(error=exc)
        self.issued.add(handle)
        return handle

    def wait_any(self, handles, timeout=None):
        self.wait_calls += 1
        for handle in handles:
            if handle not in self.issued:
                raise RuntimeError("handle was not issued by this executor")
        return next(iter(handles))

    def fetch_result(self, handle):
        if handle.error is not None:
            raise handle.error
        return handle.value

    def release(self, handle):
        self.issued.discard(handle)

    def shutdown(self, wait=True):
        self.issued.clear()


@pytest.fixture
def flaky_action():
    """Factory for actions that fail a fixed number of times before succeeding."""
    return FlakyAction


@pytest.fixture
def concurrency_tracker() -> ConcurrencyTracker:
    return ConcurrencyTracker()


@pytest.fixture
def inline_executor() -> InlineExecutor:
    return InlineExecutor()
