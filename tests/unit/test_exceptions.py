"""Unit tests for custom exception hierarchy"""
import logging
import pytest
from datetime import datetime

import psycopg

from habit_engine.exceptions import (
    HabitEngineError,
    ValidationError,
    PersistenceError,
    ConnectionError,
    QueryError,
    SchedulingError,
    SchedulingRejectedError,
    ConfigurationError,
    wrap_external_exception,
)


class TestHabitEngineError:
    """Test base exception class"""

    def test_basic_exception(self):
        """Test basic exception creation"""
        error = HabitEngineError("Test error")
        assert error.message == "Test error"
        assert error.user_message == "An error occurred. Please try again."
        assert error.request_id is not None
        assert isinstance(error.timestamp, datetime)

    def test_exception_with_context(self):
        """Test exception with full context"""
        error = HabitEngineError(
            message="Replace failed",
            request_id="req-1",
            operation="replace_challenge",
            context={"challenge_id": "abc-123"},
            user_message="Could not save your challenge"
        )
        assert error.request_id == "req-1"
        assert error.operation == "replace_challenge"
        assert error.context["challenge_id"] == "abc-123"
        assert error.user_message == "Could not save your challenge"

    def test_to_dict(self):
        """Test exception serialization"""
        error = HabitEngineError(message="Test error", request_id="req-2")
        error_dict = error.to_dict()
        assert error_dict["error"] == "HabitEngineError"
        assert error_dict["message"] == "Test error"
        assert error_dict["request_id"] == "req-2"
        assert "timestamp" in error_dict

    def test_logged_on_creation(self, caplog):
        """Test errors are logged when created"""
        with caplog.at_level(logging.ERROR, logger="habit_engine.exceptions"):
            HabitEngineError("Logged error", operation="op")

        assert "HabitEngineError: Logged error" in caplog.text


class TestSpecificErrors:
    """Test subclasses"""

    def test_validation_error(self):
        error = ValidationError("Hour must be between 0 and 23", field="start_hour", value=25)
        assert error.field == "start_hour"
        assert error.value == 25
        assert error.context == {"field": "start_hour", "value": 25}
        assert "start_hour" in error.user_message

    def test_persistence_hierarchy(self):
        assert issubclass(ConnectionError, PersistenceError)
        assert issubclass(QueryError, PersistenceError)

    def test_query_error_merges_context(self):
        error = QueryError("Query failed", query="SELECT 1", context={"table": "daily_challenges"})
        assert error.context == {"query": "SELECT 1", "table": "daily_challenges"}

    def test_scheduling_rejected_error(self):
        error = SchedulingRejectedError("Rejected twice", window="09:00-10:00", attempts=2)
        assert isinstance(error, SchedulingError)
        assert error.window == "09:00-10:00"
        assert error.attempts == 2
        assert error.context["attempts"] == 2
        assert "try again" in error.user_message.lower()

    def test_configuration_error(self):
        error = ConfigurationError("MINIMUM_JUMPS must be positive", config_key="MINIMUM_JUMPS")
        assert error.config_key == "MINIMUM_JUMPS"
        assert "configured" in error.user_message


class TestWrapExternalException:
    """Test exception wrapping helper"""

    def test_wrap_generic_exception(self):
        original = ValueError("Invalid input")
        wrapped = wrap_external_exception(original, operation="process_data", context={"k": "v"})
        assert type(wrapped) is HabitEngineError
        assert wrapped.cause == original
        assert wrapped.operation == "process_data"
        assert wrapped.context == {"k": "v"}

    def test_wrap_psycopg_operational_error(self):
        original = psycopg.OperationalError("Connection refused")
        wrapped = wrap_external_exception(original, operation="connect_db")
        assert isinstance(wrapped, ConnectionError)
        assert wrapped.cause == original

    def test_wrap_psycopg_error(self):
        original = psycopg.Error("Query failed")
        wrapped = wrap_external_exception(
            original,
            operation="replace_challenge",
            context={"challenge_id": "abc"}
        )
        assert isinstance(wrapped, QueryError)
        assert wrapped.cause == original
        assert wrapped.context["challenge_id"] == "abc"
