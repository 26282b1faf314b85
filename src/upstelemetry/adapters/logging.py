"""Logging setup for the command-line tool.

Library modules only create loggers; handlers are installed here, by the
CLI, so embedding applications keep control of their logging config.
"""

import logging
import sys
from typing import TextIO

LOG_FORMAT = "[%(asctime)s] %(message)s"
DATE_FORMAT = "%d.%m.%Y %H:%M"

_PACKAGE_LOGGER = "upstelemetry"


def configure_logging(verbose: bool = False, stream: TextIO | None = None) -> logging.Handler:
    """Attach a stream handler to the package logger.

    Args:
        verbose: Log DEBUG messages instead of INFO and above.
        stream: Destination stream. Defaults to stderr.

    Returns:
        The installed handler, so callers can remove it again.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return handler
