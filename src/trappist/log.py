"""
Logging setup for the CLI.

All modules log through children of the ``trappist`` logger; the CLI
attaches one colourised stderr handler to it.
"""

from __future__ import annotations

import logging
from typing import Union

import colorlog

LOG_FORMAT = "%(log_color)s[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

_handler: logging.Handler | None = None


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Attach a single stderr handler to the ``trappist`` logger.

    Calling this again replaces the previous handler, so the stream is
    re-bound to the current ``sys.stderr``. Colours are dropped when the
    stream is not a terminal.
    """
    global _handler

    root = logging.getLogger("trappist")
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler()
    _handler.setFormatter(
        colorlog.ColoredFormatter(
            LOG_FORMAT,
            datefmt="%H:%M:%S",
            reset=True,
            log_colors=LOG_COLORS,
            stream=_handler.stream,
        )
    )
    root.addHandler(_handler)

    if isinstance(level, str):
        level = level.upper()
    root.setLevel(level)
    return root
