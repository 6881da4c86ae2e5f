"""Logging configuration for pinray."""

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LEVEL = "WARNING"


def setup_logging(
    level: str | None = None,
    log_file: Path | None = None,
    name: str = "pinray",
) -> logging.Logger:
    """Set up logging for the package.

    Module loggers are children of the ``pinray`` logger, so configuring it
    once covers the whole package. Calling this again replaces the handlers
    installed by the previous call.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unknown names fall back to WARNING.
        log_file: Optional file to log to in addition to stderr.
        name: Logger name.

    Returns:
        Configured logger instance.
    """
    if level is None:
        level = DEFAULT_LEVEL
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
