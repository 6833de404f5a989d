# src/trackannot/logutil.py
from __future__ import annotations
import sys
import logging

LOGGER_NAME = "trackannot"


def get_logger() -> logging.Logger:
    """Return the package logger, installing the stderr handler on first use."""
    log = logging.getLogger(LOGGER_NAME)
    if not log.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s"))
        log.addHandler(h)
        log.setLevel(logging.INFO)
    return log


def set_verbose(verbose: bool) -> None:
    get_logger().setLevel(logging.DEBUG if verbose else logging.INFO)
