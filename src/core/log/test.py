"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import DEFAULT_LOGGER_NAME, get_logger, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("test")
        assert logger.name == "test"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == DEFAULT_LOGGER_NAME == "uischema-guard"

    @pytest.mark.unit
    def test_setup_logging(self) -> None:
        """Verify logging setup does not alter named logger levels."""
        stream = StringIO()
        setup_logging(level=logging.DEBUG, stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op when the root logger is already configured,
        # so only the API contract is checked here.
        assert logger.level == logging.NOTSET
