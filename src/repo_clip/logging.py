from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

_LOGGING_CONFIGURED = False
_ACTIVE_TARGET: tuple[str | None, bool] = (None, False)


def setup_logging(filename: str | Path | None = None, *, verbose: bool = False) -> structlog.BoundLogger:
    """Set up structured logging for the repo_clip module.

    The first call configures structlog. Later calls reconfigure only when the
    destination or level differs from the active one; the previous handlers
    are closed, so going back to `filename=None` restores stderr output.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.
        verbose: Emit debug events (per-file acceptance) when True.

    Returns:
        A structlog logger instance configured for the repo_clip module.
    """
    global _LOGGING_CONFIGURED, _ACTIVE_TARGET  # noqa: PLW0603
    target = (str(filename) if filename else None, verbose)
    if _LOGGING_CONFIGURED and target == _ACTIVE_TARGET:
        return structlog.get_logger("repo_clip")

    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = []
    if filename:
        handlers.append(logging.FileHandler(str(filename), encoding="utf-8"))
    else:
        handlers.append(logging.StreamHandler(sys.stderr))

    logging.basicConfig(
        level=level,
        handlers=handlers,
        format="%(message)s",
        force=_LOGGING_CONFIGURED,
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    _LOGGING_CONFIGURED = True
    _ACTIVE_TARGET = target

    return structlog.get_logger("repo_clip")


logger = setup_logging()
