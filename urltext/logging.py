"""Logger setup shared by the HTTP app, the Lambda adapter and the CLI."""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(level: int | str = logging.INFO, stream: Optional[IO[str]] = None) -> logging.Logger:
    """
    Sets up the ``urltext`` package logger with the specified level.
    Logs will be output to stdout unless another stream is given.
    Safe to call more than once; only the first call adds a handler.
    """
    logger = logging.getLogger("urltext")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(level)

    return logger
