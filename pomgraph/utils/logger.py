"""
Logging for pomgraph.

Every module logs through ``get_logger("<component>")``, which places the
logger under the ``pomgraph`` namespace. Until :func:`setup_logging` runs
the namespace only carries a ``NullHandler``, so embedding applications
see nothing unless they opt in. The CLI calls :func:`setup_logging` once
per invocation with a level derived from ``-v`` flags.

Records carry a ``component`` attribute (the logger name without the
``pomgraph.`` prefix, e.g. ``core.resolver``) used by the verbose format.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Optional

from pomgraph.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

NAMESPACE = "pomgraph"

_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
_RESET = "\033[0m"

_configured = False
_lock = threading.Lock()


def _color_enabled(stream: IO[str]) -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return stream.isatty()
    except (AttributeError, OSError, ValueError):
        return False


class ComponentFilter(logging.Filter):
    """Attach ``record.component`` for the verbose log format."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith(NAMESPACE + "."):
            name = name[len(NAMESPACE) + 1 :]
        record.component = name
        return True


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when ``use_color`` is set."""

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = False,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno) if self.use_color else None
        if color is None:
            return super().format(record)

        # Copy so other handlers still see the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{_RESET}"
        return super().format(colored)


def setup_logging(
    *,
    level: int = logging.INFO,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """Install the single pomgraph stream handler.

    Calling it again replaces the previous handler.

    Args:
        level: Threshold for the ``pomgraph`` namespace.
        verbose: Use the timestamped format that names the component.
        stream: Destination; ``sys.stderr`` by default.

    Returns:
        The installed handler.
    """
    global _configured

    stream = stream or sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.addFilter(ComponentFilter())
    handler.setFormatter(
        ColoredFormatter(
            LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            use_color=_color_enabled(stream),
        )
    )

    with _lock:
        root = logging.getLogger(NAMESPACE)
        root.handlers.clear()
        root.addHandler(handler)
        root.setLevel(level)
        root.propagate = False
        _configured = True
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``pomgraph.<name>``; a name already in the namespace is kept."""
    if not name or name == NAMESPACE or name.startswith(NAMESPACE + "."):
        logger = logging.getLogger(name or NAMESPACE)
    else:
        logger = logging.getLogger(f"{NAMESPACE}.{name}")

    root = logging.getLogger(NAMESPACE)
    if not root.handlers:
        root.addHandler(logging.NullHandler())
    return logger


def is_logging_configured() -> bool:
    return _configured


def disable_logging() -> None:
    """Silence pomgraph logging until :func:`setup_logging` runs again."""
    global _configured

    with _lock:
        root = logging.getLogger(NAMESPACE)
        root.handlers.clear()
        root.addHandler(logging.NullHandler())
        root.setLevel(logging.NOTSET)
        _configured = False
