from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
_HANDLER_NAME = "todoscan-console"


def setup_logging(level: int | str = logging.WARNING, stream=None) -> logging.Logger:
    """Attach a console handler to the package logger. Safe to call repeatedly."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger = logging.getLogger("todoscan")
    logger.setLevel(level)

    for handler in logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            handler.setStream(stream or sys.stderr)
            return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    return logger
