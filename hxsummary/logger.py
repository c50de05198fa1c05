from __future__ import annotations

import logging

from .config import LOG_FORMAT, LOGGER_NAME


def _build_logger() -> logging.Logger:
    log = logging.getLogger(LOGGER_NAME)
    if log.handlers:
        return log

    log.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    log.addHandler(handler)
    log.propagate = False
    return log


def set_verbose(verbose: bool) -> None:
    """Switch the package logger between INFO and DEBUG."""
    log.setLevel(logging.DEBUG if verbose else logging.INFO)


log = _build_logger()
