"""Unit tests for actions_cache.core.logging.

Tests structured logging configuration and logger creation.
"""

import logging
import os
from unittest.mock import MagicMock, patch

import structlog

from actions_cache.core.logging import (
    LIBRARY_NAME,
    add_library_context,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def _configure(self, environment: str) -> MagicMock:
        with patch("actions_cache.core.logging.get_settings") as mock_settings:
            mock_settings.return_value.environment = environment
            mock_settings.return_value.log_level = "DEBUG"
            mock_settings.return_value.client_label = "tests"

            with patch("actions_cache.core.logging.structlog.configure") as mock_configure:
                configure_logging()

        return mock_configure

    def test_configure_logging_development(self) -> None:
        """Development uses the console renderer."""
        mock_configure = self._configure("development")

        mock_configure.assert_called_once()
        processors = mock_configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_configure_logging_production(self) -> None:
        """Production uses the JSON renderer."""
        mock_configure = self._configure("production")

        processors = mock_configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert add_library_context in processors

    def test_binds_environment_to_context(self) -> None:
        self._configure("staging")

        assert structlog.contextvars.get_contextvars()["environment"] == "staging"

    def test_quiets_transport_loggers(self) -> None:
        self._configure("development")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_configure_logging_idempotent(self) -> None:
        """configure_logging can be called repeatedly."""
        with patch("actions_cache.core.logging.structlog.configure") as mock_configure:
            configure_logging()
            configure_logging()

        assert mock_configure.call_count == 2


class TestAddLibraryContext:

    def test_adds_library(self) -> None:
        event = add_library_context(MagicMock(), "info", {"event": "x"})

        assert event["library"] == LIBRARY_NAME

    def test_does_not_read_environment_label(self) -> None:
        with patch.dict(os.environ, {"ACTIONS_CACHE_CLIENT_LABEL": "from-env"}):
            event = add_library_context(MagicMock(), "info", {"event": "x"})

        assert "client_label" not in event

    def test_keeps_bound_label(self) -> None:
        event = add_library_context(MagicMock(), "info", {"event": "x", "client_label": "mine"})

        assert event["client_label"] == "mine"


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_with_name(self) -> None:
        with patch("actions_cache.core.logging.structlog.get_logger") as mock_get:
            mock_get.return_value = MagicMock()

            logger = get_logger("actions_cache.cache.lookup")

            mock_get.assert_called_once_with("actions_cache.cache.lookup")
            assert logger is mock_get.return_value

    def test_get_logger_returns_usable_logger(self) -> None:
        logger = get_logger(__name__)

        logger.debug("test event", key="value")
