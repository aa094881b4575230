"""Shared logger for the keypad calculator."""
import logging
import sys

LOGGER_NAME: str = "keypad_calculator"
LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(processName)s: %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stream handler to the package logger and set its level.

    Calling it again only updates the level.

    :param str level: Logging level name (DEBUG, INFO, WARNING, ...)

    :return: The package logger
    :rtype: logging.Logger
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
    return package_logger


logger: logging.Logger = logging.getLogger(LOGGER_NAME)
