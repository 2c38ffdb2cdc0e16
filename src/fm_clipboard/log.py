"""Logging configuration for fm-clipboard."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path


def setup_logging(log_path: Path, level: str = "INFO") -> None:
    """Configure package logger with a rotating file handler.

    Idempotent — skips if handler is already attached.
    """
    root = logging.getLogger("fm_clipboard")
    if root.handlers:
        return

    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    handler.setFormatter(logging.Formatter(fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))

    root.setLevel(level)
    root.addHandler(handler)
