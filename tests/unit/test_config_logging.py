"""Unit tests for settings and structured logging.

Run with: pytest tests/unit/test_config_logging.py -v
"""

import json
import logging

import pytest
from pydantic import ValidationError

from vettdre.config import Settings, get_settings
from vettdre.logging import (
    JSONFormatter,
    TextFormatter,
    get_context_logger,
    log_geocode_event,
    log_resolution_event,
    setup_logging,
)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        """Test defaults with no environment overrides."""
        settings = get_settings()

        assert settings.geocodio_daily_limit == 2500
        assert settings.geocodio_base_url == "https://api.geocod.io/v1.7"
        assert settings.geocoding_enabled is False
        assert settings.is_development

    def test_environment_override(self, monkeypatch):
        """Test values are read from environment variables."""
        monkeypatch.setenv("GEOCODIO_API_KEY", "abc123")
        monkeypatch.setenv("GEOCODIO_DAILY_LIMIT", "100")
        get_settings.cache_clear()

        settings = get_settings()

        assert settings.geocoding_enabled is True
        assert settings.geocodio_daily_limit == 100

    def test_api_key_hidden_from_repr(self, monkeypatch):
        """Test the key never appears in the settings repr."""
        monkeypatch.setenv("GEOCODIO_API_KEY", "super-secret")

        assert "super-secret" not in repr(Settings())

    def test_negative_limit_rejected(self, monkeypatch):
        """Test invalid quotas fail validation."""
        monkeypatch.setenv("GEOCODIO_DAILY_LIMIT", "-5")

        with pytest.raises(ValidationError):
            Settings()

    def test_cached(self):
        """Test get_settings returns one shared instance."""
        assert get_settings() is get_settings()


class TestFormatters:
    """Tests for the JSON and text formatters."""

    def test_extra_fields_included(self):
        """Test fields passed via extra end up in the JSON document."""
        record = logging.LogRecord(
            "vettdre.test", logging.INFO, __file__, 10, "hello %s", ("world",), None
        )
        record.event = "entity_resolution"
        record.confidence = 90

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["logger"] == "vettdre.test"
        assert data["event"] == "entity_resolution"
        assert data["confidence"] == 90
        assert "args" not in data

    def test_text_formatter_appends_event_fields(self):
        """Test the development format shows event fields after the message."""
        record = logging.LogRecord(
            "vettdre.geocoding", logging.WARNING, __file__, 10, "Geocode no_result", (), None
        )
        record.event = "geocode_escalation"
        record.outcome = "no_result"
        record.confidence = None

        line = TextFormatter().format(record)

        assert line.endswith("Geocode no_result [event=geocode_escalation outcome=no_result]")


class TestLoggingHelpers:
    """Tests for logger helpers and event functions."""

    def test_context_logger_adds_fields(self, caplog):
        """Test adapter context is attached to every record."""
        logger = get_context_logger("vettdre.test", component="owner_resolver")

        with caplog.at_level(logging.INFO, logger="vettdre.test"):
            logger.info("clustered", extra={"cluster_count": 2})

        record = caplog.records[-1]
        assert record.component == "owner_resolver"
        assert record.cluster_count == 2

    def test_call_site_extra_wins_over_context(self, caplog):
        """Test per-call fields override adapter context."""
        logger = get_context_logger("vettdre.test", component="portfolio")

        with caplog.at_level(logging.INFO, logger="vettdre.test"):
            logger.info("grouped", extra={"component": "owner"})

        assert caplog.records[-1].component == "owner"

    def test_resolution_event(self, caplog):
        """Test resolution events log at debug with their fields."""
        with caplog.at_level(logging.DEBUG, logger="vettdre.resolution"):
            log_resolution_event("group_by_owner", "Smith LLC", "SMITH", 80, True)

        record = caplog.records[-1]
        assert record.levelno == logging.DEBUG
        assert record.event == "entity_resolution"
        assert record.resolved == "SMITH"

    @pytest.mark.parametrize(
        "outcome,level",
        [("resolved", logging.DEBUG), ("budget_exhausted", logging.WARNING)],
    )
    def test_geocode_event_levels(self, caplog, outcome, level):
        """Test failed escalations are warnings and successes are debug."""
        with caplog.at_level(logging.DEBUG, logger="vettdre.geocoding"):
            log_geocode_event("10 Main St", outcome)

        record = caplog.records[-1]
        assert record.levelno == level
        assert record.outcome == outcome

    def test_setup_logging_text_format(self, monkeypatch):
        """Test the text formatter is installed on the package logger only."""
        monkeypatch.setenv("LOG_FORMAT", "text")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        get_settings.cache_clear()
        root = logging.getLogger()
        package = logging.getLogger("vettdre")
        saved = (package.handlers[:], package.level, package.propagate)
        root_handlers = root.handlers[:]

        try:
            configured = setup_logging()

            assert configured is package
            assert package.level == logging.DEBUG
            assert isinstance(package.handlers[0].formatter, TextFormatter)
            assert package.propagate is False
            assert root.handlers == root_handlers
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            package.handlers, package.propagate = saved[0], saved[2]
            package.setLevel(saved[1])

    def test_setup_logging_arguments_override_settings(self):
        """Test explicit level and format win over settings."""
        package = logging.getLogger("vettdre")
        saved = (package.handlers[:], package.level, package.propagate)

        try:
            setup_logging(level="warning", log_format="json")

            assert package.level == logging.WARNING
            assert isinstance(package.handlers[0].formatter, JSONFormatter)
        finally:
            package.handlers, package.propagate = saved[0], saved[2]
            package.setLevel(saved[1])
