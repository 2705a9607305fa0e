"""Tests for taskpool.core.errors module."""

import pytest

from taskpool.core.errors import (
    ConfigError,
    CoordinationError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    MissingConfigError,
    TaskPoolError,
    categorize_error,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.task_name is None
        assert ctx.execution_id is None
        assert ctx.to_dict() == {}

    def test_to_dict_skips_none_and_merges_metadata(self):
        ctx = ErrorContext(task_name="fetch", retry_count=0, metadata={"slot": 2})
        assert ctx.to_dict() == {"task_name": "fetch", "retry_count": 0, "slot": 2}


class TestTaskPoolError:
    """Test the base error."""

    def test_defaults(self):
        error = TaskPoolError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.category == ErrorCategory.INTERNAL
        assert error.retryable is False
        assert error.cause is None

    def test_cause_is_chained(self):
        original = OSError("broken pipe")
        error = TaskPoolError("executor failed", cause=original)
        assert error.cause is original
        assert error.__cause__ is original

    def test_with_context_sets_known_fields_and_metadata(self):
        error = CoordinationError("duplicate").with_context(task_name="t1", execution_id="e1", slot=3)
        assert error.context.task_name == "t1"
        assert error.context.execution_id == "e1"
        assert error.context.metadata == {"slot": 3}

    def test_to_dict(self):
        error = CoordinationError("duplicate", cause=KeyError("x")).with_context(task_name="t1")
        data = error.to_dict()
        assert data["error_type"] == "CoordinationError"
        assert data["category"] == "INTERNAL"
        assert data["retryable"] is False
        assert data["context"] == {"task_name": "t1"}
        assert "cause" in data

    def test_repr(self):
        assert repr(TaskPoolError("x")) == "TaskPoolError('x', category=INTERNAL)"


class TestConfigErrors:
    def test_missing_config_mentions_field(self):
        error = MissingConfigError("Name")
        assert "Name" in str(error)
        assert error.key == "Name"
        assert error.category == ErrorCategory.CONFIG
        assert isinstance(error, ConfigError)

    def test_missing_config_custom_message(self):
        error = MissingConfigError("Action", "no action given")
        assert str(error) == "no action given"

    def test_invalid_config(self):
        error = InvalidConfigError("executor_backend", "gpu")
        assert error.key == "executor_backend"
        assert error.value == "gpu"
        assert "'gpu'" in str(error)

    def test_config_errors_are_not_retryable(self):
        with pytest.raises(ConfigError) as exc_info:
            raise MissingConfigError("Name")
        assert exc_info.value.retryable is False


class TestCategorizeError:
    def test_taskpool_error_uses_own_category(self):
        assert categorize_error(MissingConfigError("Name")) == ErrorCategory.CONFIG

    def test_action_errors_are_execution_failures(self):
        assert categorize_error(ValueError("bad")) == ErrorCategory.EXECUTION

    def test_base_exceptions_are_unknown(self):
        assert categorize_error(KeyboardInterrupt()) == ErrorCategory.UNKNOWN
