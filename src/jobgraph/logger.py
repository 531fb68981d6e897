"""Logging configuration for jobgraph with custom verbosity levels."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

# Custom levels between the standard ones
CHANGES_LEVEL = 25  # Between INFO (20) and WARNING (30) - state transitions
CHECKS_LEVEL = 15  # Between DEBUG (10) and INFO (20) - readiness checks

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

# Verbosity -> level; anything unknown falls back to errors only
_LEVELS = {0: logging.ERROR, 1: CHANGES_LEVEL, 2: CHECKS_LEVEL, 3: logging.DEBUG}


class JobGraphLogger(logging.Logger):
    """Logger with semantic verbosity methods.

    - changes(): job state transitions (verbosity 1)
    - checks(): readiness decisions made by the resolver (verbosity 2)
    - debug(): queue mechanics (verbosity 3)
    """

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a state change (verbosity level 1)."""
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a readiness check (verbosity level 2)."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> JobGraphLogger:
    """Get the jobgraph logger instance (singleton).

    Use setup_logger() to configure it before first use.
    """
    logging.setLoggerClass(JobGraphLogger)
    logger = logging.getLogger("jobgraph")
    assert isinstance(logger, JobGraphLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the jobgraph logger with a verbosity level.

    Can be called multiple times to reconfigure the logger.

    Args:
        verbosity: 0=silent (errors only), 1=changes, 2=checks, 3=debug
        stream: Optional output stream (defaults to sys.stderr)
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_LEVELS.get(verbosity, logging.ERROR))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Reset the logger to a clean state (used between tests)."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)


def checks_enabled() -> bool:
    """Check if checks-level logging is enabled (verbosity >= 2)."""
    return get_logger().isEnabledFor(CHECKS_LEVEL)
