from __future__ import annotations

import logging
import os
import sys

import structlog


def configure_logging(verbose: bool = False) -> None:
    """Send structlog output to stderr.

    WARNING and above by default; DEBUG with `verbose` or when GREPBIN_DEBUG
    is set in the environment.
    """
    debug = verbose or bool(os.environ.get("GREPBIN_DEBUG"))
    level = logging.DEBUG if debug else logging.WARNING
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
