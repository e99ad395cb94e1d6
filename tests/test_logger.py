"""Tests for package logging setup."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from soapsimple.utils.config_loader import LoggingSection
from soapsimple.utils.logger import (
    PACKAGE_LOGGER_NAME,
    setup_logger,
    setup_logger_from_config,
)


@pytest.fixture(autouse=True)
def clean_package_logger() -> Iterator[logging.Logger]:
    """Remove handlers added to the package logger by a test."""
    package_logger: logging.Logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    original_handlers: list[logging.Handler] = list(package_logger.handlers)
    original_level: int = package_logger.level
    yield package_logger
    for handler in package_logger.handlers:
        if handler not in original_handlers:
            handler.close()
            package_logger.removeHandler(handler)
    package_logger.setLevel(original_level)


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_console_handler_added_once(self) -> None:
        """Test that repeated calls do not duplicate handlers."""
        first: logging.Logger = setup_logger(logging.INFO)
        handler_count: int = len(first.handlers)

        second: logging.Logger = setup_logger(logging.DEBUG)

        assert second is first
        assert len(second.handlers) == handler_count
        assert second.level == logging.DEBUG
        assert all(handler.level == logging.DEBUG for handler in second.handlers)

    def test_file_handler(self, tmp_path: Path) -> None:
        """Test logging to a file in a directory that doesn't exist yet."""
        log_file: Path = tmp_path / 'logs' / 'soapsimple.log'

        package_logger: logging.Logger = setup_logger(
            logging.WARNING, log_file_path=log_file, file_level=logging.DEBUG
        )
        logging.getLogger('soapsimple.client').debug('written to file only')
        for handler in package_logger.handlers:
            handler.flush()

        assert package_logger.level == logging.DEBUG
        assert 'written to file only' in log_file.read_text(encoding='utf-8')


class TestSetupLoggerFromConfig:
    """Tests for setup_logger_from_config function."""

    def test_uses_console_level(self) -> None:
        """Test that the console level comes from the logging section."""
        package_logger: logging.Logger = setup_logger_from_config(
            LoggingSection(console_level='ERROR')
        )

        assert package_logger.level == logging.ERROR
