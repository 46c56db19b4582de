"""Logging setup for the crystal CLI and MCP server."""

import sys

from loguru import logger

LOG_FORMAT = "{level.icon} {message}"
VERBOSE_LOG_FORMAT = "{time:HH:mm:ss} {level.icon} {name}:{line} {message}"


def configure_logging(*, verbose: bool = False) -> None:
    """Route logs to stderr; stdout carries the MCP stdio stream.

    Verbose mode lowers the level to DEBUG and prefixes each line with a
    timestamp and source location. Previously installed sinks are replaced.
    """
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format=VERBOSE_LOG_FORMAT)
    else:
        logger.add(sys.stderr, level="INFO", format=LOG_FORMAT)
