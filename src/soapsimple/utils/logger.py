# soapsimple/utils/logger.py
"""
Logging configuration for the soapsimple package.

Provides centralized logging setup to ensure consistent log formatting
and output across all modules in the package.
"""

import logging
from pathlib import Path
from sys import stdout

from .config_loader import LoggingSection

PACKAGE_LOGGER_NAME: str = 'soapsimple'

LOG_FORMAT: logging.Formatter = logging.Formatter(
    fmt='%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)


def setup_logger(
    logging_level: int = logging.INFO,
    log_file_path: Path | None = None,
    file_level: int | None = None,
) -> logging.Logger:
    """
    Set up logging for the soapsimple package.

    Configures the package-level logger so that every module logger
    (soapsimple.client, soapsimple.transport, ...) inherits the same
    handlers. Console output always goes to stdout; a file handler is added
    when log_file_path is given.

    The function is idempotent - calling it again updates the levels of the
    existing handlers instead of adding duplicates.

    Args:
        logging_level: Level for console output. Defaults to INFO.
        log_file_path: Optional path to a log file, opened in append mode.
        file_level: Level for the file handler. Defaults to logging_level.

    Returns:
        The package logger.

    Example:
        >>> setup_logger(logging.DEBUG)
        >>> setup_logger(log_file_path=Path('soapsimple.log'), file_level=logging.DEBUG)
    """
    package_logger: logging.Logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    effective_file_level: int = logging_level if file_level is None else file_level
    package_logger.setLevel(
        min(logging_level, effective_file_level) if log_file_path else logging_level
    )

    console_handlers: list[logging.Handler] = [
        handler
        for handler in package_logger.handlers
        if not isinstance(handler, logging.FileHandler)
    ]
    file_handlers: list[logging.FileHandler] = [
        handler
        for handler in package_logger.handlers
        if isinstance(handler, logging.FileHandler)
    ]

    if console_handlers:
        for existing_handler in console_handlers:
            existing_handler.setLevel(logging_level)
    else:
        console_handler: logging.Handler = logging.StreamHandler(stdout)
        console_handler.setFormatter(LOG_FORMAT)
        console_handler.setLevel(logging_level)
        package_logger.addHandler(console_handler)

    if log_file_path is not None:
        if file_handlers:
            for existing_file_handler in file_handlers:
                existing_file_handler.setLevel(effective_file_level)
        else:
            # Ensure parent directory exists
            log_file_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler: logging.FileHandler = logging.FileHandler(
                filename=str(log_file_path),
                mode='a',
                encoding='utf-8',
            )
            file_handler.setFormatter(LOG_FORMAT)
            file_handler.setLevel(effective_file_level)
            package_logger.addHandler(file_handler)
            package_logger.info('Logging to file: %s', log_file_path)

    return package_logger


def setup_logger_from_config(logging_config: LoggingSection) -> logging.Logger:
    """Configure package logging from the 'logging' section of config.yaml."""
    return setup_logger(
        logging_level=logging_config.console_level,
        log_file_path=logging_config.file_path,
        file_level=logging_config.file_level,
    )
