# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Logging helpers for imgmeta

Library modules obtain child loggers from get_logger() and only emit
records. Handlers are installed by configure_logging(), which the command
line entry point calls.

Copyright 2025 DNAi inc.
"""

import logging
from logging import Logger
from typing import Optional, Union

LOGGER_NAMESPACE = "imgmeta"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: Union[int, str] = logging.WARNING) -> Logger:
    """
    Configure the package logger with a single stderr handler.

    Args:
        level: Logging level, either numeric or a name such as "DEBUG"

    Returns:
        Configured package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)

    root_logger.debug("Logging configured at level %s", logging.getLevelName(level))
    return root_logger


def get_logger(name: Optional[str] = None) -> Logger:
    """Return a child logger under the package namespace."""
    base = logging.getLogger(LOGGER_NAMESPACE)
    if name:
        return base.getChild(name)
    return base
