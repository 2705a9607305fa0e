"""
Centralized settings for the task pool.

``TaskPoolSettings`` supplies the defaults a ``TaskPool`` falls back to when
the caller does not pass them explicitly: slot count, retry limit and which
executor backend runs task actions. All fields can be set via ``TASKPOOL_*``
environment variables or a ``.env`` file.

Usage::

    $ export TASKPOOL_NUM_SLOTS=8
    $ export TASKPOOL_EXECUTOR_BACKEND=process

    settings = get_settings()
    pool = TaskPool()          # 8 slots, process executor

Tags:
    configuration, settings, pydantic, environment, taskpool

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExecutorBackend(str, Enum):
    """Which executor runs task actions."""

    THREAD = "thread"
    PROCESS = "process"


class TaskPoolSettings(BaseSettings):
    """Task pool configuration.

    Fields
    ──────
    num_slots            : Default concurrent slots for a new pool
    max_retry            : Default retry limit (<0 unlimited, 0 none)
    executor_backend     : thread | process
    executor_max_workers : Worker count for the default executor (None = backend default)
    log_level            : Structlog log level
    log_format           : console | json
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKPOOL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Scheduling ───────────────────────────────────────────────
    num_slots: int = Field(default=4, description="Default slot count; non-positive values clamp to 1")
    max_retry: int = Field(default=0, description="Default retry limit; negative means unlimited")

    # ── Executor ─────────────────────────────────────────────────
    executor_backend: ExecutorBackend = Field(default=ExecutorBackend.THREAD)
    executor_max_workers: int | None = Field(default=None)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("log_format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("console", "json"):
            raise ValueError(f"log_format must be 'console' or 'json', got {value!r}")
        return value


_settings_cache: dict[str, TaskPoolSettings] = {}


def get_settings(*, _force_reload: bool = False) -> TaskPoolSettings:
    """Load, validate, and cache a :class:`TaskPoolSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = TaskPoolSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = [
    "ExecutorBackend",
    "TaskPoolSettings",
    "get_settings",
    "clear_settings_cache",
]
