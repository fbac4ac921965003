"""
Logger shared by the exporter's probers, reconciler and HTTP server.

Probe outcomes and reconcile summaries go to stdout (and to ``LOG_FILE``
when set) at the level named by ``LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

DEFAULT_LOGGER_NAME = "api-health-exporter"
LOG_FORMAT = "[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the named logger, attaching the exporter's handlers on first use."""
    if name is None:
        name = DEFAULT_LOGGER_NAME

    logger_instance = logging.getLogger(name)

    if not logger_instance.handlers:
        configure_logger(logger_instance)

    return logger_instance


def _resolve_level() -> int:
    raw = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.INFO


def configure_logger(logger_instance: logging.Logger) -> None:
    """
    Configure a logger instance with console and optional file handlers.

    The file handler is only attached when ``LOG_FILE`` is set.

    Args:
        logger_instance: Logger instance to configure.
    """
    logger_instance.setLevel(_resolve_level())

    formatter = logging.Formatter(LOG_FORMAT)

    log_file = os.environ.get("LOG_FILE")
    if log_file:
        try:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(path)
            file_handler.setFormatter(formatter)
            logger_instance.addHandler(file_handler)
        except OSError as e:
            print(f"Warning: Could not set up file logging: {e}", file=sys.stderr)

    # stdout is always attached
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger_instance.addHandler(console_handler)


logger = get_logger(DEFAULT_LOGGER_NAME)


__all__ = ["get_logger", "logger", "configure_logger"]
