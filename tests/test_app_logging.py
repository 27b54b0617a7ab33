"""Tests for logging configuration."""

import logging

from pantry_tracker.api.app import create_app
from pantry_tracker.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("pantry_tracker")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging("debug")
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False


def test_create_app_uses_configured_level(container) -> None:
    container.settings.log_level = "WARNING"

    create_app(container)

    assert logging.getLogger("pantry_tracker").level == logging.WARNING
