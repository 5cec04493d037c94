#!/usr/bin/env python3
"""
Purpose:
    Logging setup for the contentschema package logger.
"""
from __future__ import annotations

import logging
import sys
from typing import Union

PACKAGE_LOGGER = "contentschema"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_HANDLER_ATTR = "_contentschema_handler"


def configure_logging(level: Union[str, int] = "INFO") -> logging.Logger:
    """
    Attach a single stderr handler to the package logger and set its level.

    Safe to call more than once; the handler is replaced, not duplicated.

    Raises:
        ValueError: for an unknown level name
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(pkg_logger.handlers):
        if getattr(h, _HANDLER_ATTR, False):
            pkg_logger.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    setattr(handler, _HANDLER_ATTR, True)
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level)
    pkg_logger.propagate = False
    return pkg_logger
