"""Logging setup shared by the Streamlit app and the batch scripts."""

from __future__ import annotations

import logging
import os

ENV_LOG_LEVEL = "TARP_DASH_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str | int | None = None) -> None:
    """
    Configure the ``core`` logger tree once.

    Level priority: explicit argument, then ``TARP_DASH_LOG_LEVEL``, then INFO.
    Calling again only changes the level.
    """
    global _configured

    if level is None:
        level = os.getenv(ENV_LOG_LEVEL, "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger("core")
    root.setLevel(level)

    if not _configured:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
