"""Logging setup: stderr diagnostics and the hook block log."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LOGGER_NAME = "dotctl"
HOOK_LOGGER_NAME = "dotctl.hooks"
HOOK_LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"


def setup_logging(verbose: bool = False) -> logging.Logger:
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(LOGGER_NAME)
    handler = next((h for h in logger.handlers if type(h) is logging.StreamHandler), None)
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    else:
        handler.setStream(sys.stderr)
    # hook records propagate here at INFO; only the file log should keep those
    handler.setLevel(level)
    logger.setLevel(level)
    return logger


def hook_logger(log_file: Path | None) -> logging.Logger:
    """Return the hook logger, attaching a file handler for *log_file* once.

    The block log is best-effort: if its directory cannot be created the
    logger keeps whatever handlers it already has.
    """
    logger = logging.getLogger(HOOK_LOGGER_NAME)
    logger.setLevel(logging.INFO)
    if log_file is None:
        return logger
    target = os.path.abspath(log_file)
    for h in logger.handlers:
        if isinstance(h, logging.FileHandler) and h.baseFilename == target:
            return logger
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target)
    except OSError as e:
        logging.getLogger(LOGGER_NAME).debug("hook log unavailable: %s", e)
        return logger
    handler.setFormatter(logging.Formatter(HOOK_LOG_FORMAT))
    logger.addHandler(handler)
    return logger
