"""Logging setup for the command line."""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[tag]}</cyan> | {message}"
)


def setup_logging(level: str = "WARNING") -> None:
    """Send log records at *level* and above to stderr, tagged by engine."""
    logger.remove()
    logger.configure(extra={"tag": "svckit"})
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
