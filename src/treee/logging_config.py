"""Logging configuration for the Tree-E outliner."""

import sys
from pathlib import Path

from loguru import logger


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure loguru with appropriate level.

    Args:
        verbose: Log DEBUG messages (every no-op and storage access) to stderr.
        log_file: Also write DEBUG-level logs to this file, rotated at 1 MB.
    """
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(sys.stderr, level=level, format="{level.icon} {message}")
    if log_file is not None:
        logger.add(log_file, level="DEBUG", rotation="1 MB", retention=3)
