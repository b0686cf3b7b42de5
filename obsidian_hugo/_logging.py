"""Logging configuration for obsidian_hugo.

Modules log through loguru's shared logger:

    from loguru import logger

    logger.debug("Every internal step")
    logger.warning("Handled but unexpected, e.g. a missing image")
    logger.error("A note failed to export")

Debug output is only shown when the export configuration enables debug mode.
"""

import sys

from loguru import logger

LOG_FORMAT = "<level>[Hugo Export {level}]</level> {name}: {message}"


def configure_logging(debug_mode: bool = False) -> None:
    """Install a single stderr sink.

    Args:
        debug_mode: Trace every internal step when True, INFO and above otherwise
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if debug_mode else "INFO",
        format=LOG_FORMAT,
    )
