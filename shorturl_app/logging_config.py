"""Logging configuration for the URL shortener."""

import logging
import sys


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Setup logging for the ``shorturl_app`` logger hierarchy.

    Module loggers (``logging.getLogger(__name__)``) propagate to the
    package logger configured here.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured package logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("shorturl_app")
    logger.setLevel(numeric_level)

    # Remove existing handlers (setup may run more than once under reload)
    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger
