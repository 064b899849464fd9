"""
Logging setup for the command-line entry points.

Library modules wrap a stdlib logger with ``structlog.wrap_logger`` and each
package installs a ``NullHandler``, so nothing is printed until an
application configures logging. The CLIs call ``configure_logging()``, which
renders events with structlog and sends them to stderr so stdout stays
parseable (--json).
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

PACKAGE_LOGGERS = ("gs1_decoder", "inventory")

_handler: Optional[logging.Handler] = None


def configure_logging(verbosity: int = 0) -> None:
    """0 shows warnings and errors, 1 adds info, 2 or more adds debug."""
    global _handler

    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    reset_logging()

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("%(message)s"))
    for name in PACKAGE_LOGGERS:
        package_logger = logging.getLogger(name)
        package_logger.addHandler(_handler)
        package_logger.setLevel(level)


def reset_logging() -> None:
    """Undo configure_logging(); library loggers go quiet again."""
    global _handler

    if _handler is not None:
        for name in PACKAGE_LOGGERS:
            package_logger = logging.getLogger(name)
            package_logger.removeHandler(_handler)
            package_logger.setLevel(logging.NOTSET)
        _handler = None

    structlog.reset_defaults()
