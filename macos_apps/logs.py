"""Logging setup for macos-apps."""

import logging
import sys

# Finer than DEBUG; used for per-record diagnostics that are noisy on real hosts
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"


def resolve_level(level: str) -> int:
    """
    Translate a level name into its numeric value.

    Args:
        level: Level name such as "INFO" or "TRACE" (case-insensitive)

    Returns:
        Numeric logging level

    Raises:
        ValueError: If the name is not a known logging level
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level '{level}'")
    return numeric


def setup_logging(level: str = "WARNING") -> None:
    """Attach a single stderr handler to the root logger."""
    logger = logging.getLogger()
    logger.setLevel(resolve_level(level))
    if logger.handlers:  # don't double add on repeated CLI invocations
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
