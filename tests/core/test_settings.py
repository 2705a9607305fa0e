"""Tests for taskpool.core.settings.

Covers:
- Defaults
- Environment variable override (TASKPOOL_ prefix)
- Validation of log settings
- Caching
"""

import pytest
from pydantic import ValidationError

from taskpool.core.settings import (
    ExecutorBackend,
    TaskPoolSettings,
    clear_settings_cache,
    get_settings,
)


class TestTaskPoolSettingsDefaults:
    def test_default_num_slots(self):
        assert TaskPoolSettings().num_slots == 4

    def test_default_max_retry(self):
        assert TaskPoolSettings().max_retry == 0

    def test_default_executor_backend(self):
        s = TaskPoolSettings()
        assert s.executor_backend == ExecutorBackend.THREAD
        assert s.executor_max_workers is None

    def test_default_logging(self):
        s = TaskPoolSettings()
        assert s.log_level == "INFO"
        assert s.log_format == "console"


class TestTaskPoolSettingsEnvOverride:
    def test_num_slots_from_env(self, monkeypatch):
        monkeypatch.setenv("TASKPOOL_NUM_SLOTS", "8")
        assert TaskPoolSettings().num_slots == 8

    def test_unlimited_retry_from_env(self, monkeypatch):
        monkeypatch.setenv("TASKPOOL_MAX_RETRY", "-1")
        assert TaskPoolSettings().max_retry == -1

    def test_backend_from_env(self, monkeypatch):
        monkeypatch.setenv("TASKPOOL_EXECUTOR_BACKEND", "process")
        assert TaskPoolSettings().executor_backend == ExecutorBackend.PROCESS

    def test_unprefixed_env_ignored(self, monkeypatch):
        monkeypatch.setenv("NUM_SLOTS", "99")
        assert TaskPoolSettings().num_slots == 4

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("TASKPOOL_LOG_LEVEL", "debug")
        assert TaskPoolSettings().log_level == "DEBUG"


class TestTaskPoolSettingsValidation:
    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            TaskPoolSettings(log_format="xml")

    def test_invalid_backend(self):
        with pytest.raises(ValidationError):
            TaskPoolSettings(executor_backend="gpu")


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_clear_cache_picks_up_env(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("TASKPOOL_NUM_SLOTS", "2")
        assert get_settings().num_slots == first.num_slots
        clear_settings_cache()
        assert get_settings().num_slots == 2

    def test_force_reload(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("TASKPOOL_MAX_RETRY", "5")
        reloaded = get_settings(_force_reload=True)
        assert reloaded is not first
        assert reloaded.max_retry == 5
