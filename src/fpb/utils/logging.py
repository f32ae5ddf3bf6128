"""Logging setup for the fpb bridge.

Every module logs under the ``fpb`` logger hierarchy. ``setup_logging``
installs the stderr handler (plus an optional file handler) on that logger.
The CLI flags ``--debug``, ``--info``, ``--warn`` and ``--error`` pick the
level through ``VERBOSITY_LEVELS``; without a flag the configured level
(``WARNING`` by default) applies.
"""

from __future__ import annotations

import logging
import sys

from fpb.config.settings import LoggingConfig

# Command-line verbosity flags and the logging level each one selects.
VERBOSITY_LEVELS = {
    "debug": "DEBUG",
    "info": "INFO",
    "warn": "WARNING",
    "error": "ERROR",
}


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Configure logging for the fpb helper.

    Sets up the ``fpb`` logger with the specified level, format, and
    optional file handler. Calling it again replaces the handlers
    installed by the previous call.

    Args:
        config: Logging configuration. If None, uses defaults
                (WARNING level, stderr output).

    Returns:
        The configured ``fpb`` logger.
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger("fpb")
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.WARNING))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler (optional)
    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.info("Logging initialized at %s level", config.level)
    return root_logger
