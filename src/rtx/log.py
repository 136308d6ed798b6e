"""Logging setup.

Library modules log through ``loguru.logger`` and never touch its sinks.
The package is disabled in loguru on import, so nothing is printed by
default. Applications call configure_logging() once to turn it on and choose
how much they see:

    INFO: render start and finish with timings, saved files
    DEBUG: per-row progress, degenerate geometry, camera axis fallbacks
"""

from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str | int = "INFO") -> int:
    """Enable rtx logging and replace all loguru sinks with a single stderr sink.

    Args:
        level: Minimum level to emit, e.g. "DEBUG" or "WARNING".

    Returns:
        The id of the new sink, usable with logger.remove().
    """
    logger.enable("rtx")
    logger.remove()
    return logger.add(sys.stderr, level=level, format=LOG_FORMAT)
