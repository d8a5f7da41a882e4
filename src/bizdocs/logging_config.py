"""Logging setup for bizdocs."""

__all__ = ["get_logger", "configure_logging", "reset_logging"]

import logging
import os
import sys
import threading
from typing import Optional

_LOGGER_PREFIX = "bizdocs"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: Optional[logging.StreamHandler] = None
_lock = threading.Lock()


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the bizdocs namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a stderr handler to the bizdocs root logger.

    Calling again replaces the handler, so it always writes to the current
    ``sys.stderr``.

    Args:
        level: Level name; falls back to BIZDOCS_LOG_LEVEL, then WARNING
    """
    global _handler
    level_name = (level or os.environ.get("BIZDOCS_LOG_LEVEL") or "WARNING").upper()
    root = logging.getLogger(_LOGGER_PREFIX)
    with _lock:
        if _handler is not None:
            root.removeHandler(_handler)
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(_handler)
        root.propagate = False
        root.setLevel(getattr(logging, level_name, logging.WARNING))


def reset_logging() -> None:
    """Remove the handler installed by configure_logging (used by tests)."""
    global _handler
    root = logging.getLogger(_LOGGER_PREFIX)
    with _lock:
        if _handler is not None:
            root.removeHandler(_handler)
            _handler = None
        root.propagate = True
        root.setLevel(logging.NOTSET)
