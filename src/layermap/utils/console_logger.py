"""Console logging for the command line entry points."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
_DATE_FORMAT = "%H:%M:%S"


def ensure_console_logger(
    logger: logging.Logger,
    handler_name: str,
    *,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Attach one named console handler to *logger* and return it.

    Log records go to stderr by default so that command output on stdout
    stays parseable.  Calling again with the same *handler_name* reuses the
    installed handler and only updates the levels.
    """

    for handler in logger.handlers:
        if handler.name == handler_name:
            break
    else:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.name = handler_name
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(handler)
    handler.setLevel(level)
    logger.setLevel(level)
    return handler
