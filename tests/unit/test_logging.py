"""Unit tests for logging helpers."""

import logging

import pytest

from habitquest.core.config import settings
from habitquest.core.logging import configure_logfire, engine_context, log_progression_event, span


logger = logging.getLogger("habitquest.tests")


@pytest.mark.unit
class TestEngineContext:
    """Tests for engine_context function."""

    def test_engine_defaults(self):
        """Test the engine name and environment come from settings."""
        assert engine_context() == {"engine": settings.service_name, "environment": settings.environment}

    def test_none_fields_dropped(self):
        """Test fields without a value are left out."""
        context = engine_context(user_id=None, task_id="t1")

        assert "user_id" not in context
        assert context["task_id"] == "t1"

    def test_caller_fields_override_defaults(self):
        """Test an explicit environment replaces the configured one."""
        assert engine_context(environment="staging")["environment"] == "staging"


@pytest.mark.unit
class TestLogProgressionEvent:
    """Tests for log_progression_event function."""

    def test_attaches_engine_and_ids(self, caplog):
        """Test identifiers and event fields land on the log record."""
        with caplog.at_level(logging.INFO, logger="habitquest.tests"):
            log_progression_event(logger, "info", "Streak updated", user_id="u1", task_id="t1", new_streak=4)

        record = caplog.records[-1]
        assert record.message == "Streak updated"
        assert record.engine == settings.service_name
        assert record.user_id == "u1"
        assert record.task_id == "t1"
        assert record.new_streak == 4

    def test_level_is_respected(self, caplog):
        """Test the requested level is used."""
        with caplog.at_level(logging.WARNING, logger="habitquest.tests"):
            log_progression_event(logger, "WARNING", "Level up", user_id="u1", new_level=5)

        record = caplog.records[-1]
        assert record.levelname == "WARNING"
        assert record.new_level == 5

    def test_anonymous_event(self, caplog):
        """Test no user_id or task_id field is added when none is given."""
        with caplog.at_level(logging.INFO, logger="habitquest.tests"):
            log_progression_event(logger, "info", "Anonymous", source="cli")

        record = caplog.records[-1]
        assert not hasattr(record, "user_id")
        assert not hasattr(record, "task_id")
        assert record.source == "cli"
        assert record.environment == settings.environment


@pytest.mark.unit
def test_configure_without_token_and_span():
    """Test Logfire can be configured locally and tagged spans opened without a token."""
    configure_logfire()

    with span("tests.span", user_id="u1", task_id=None):
        pass
