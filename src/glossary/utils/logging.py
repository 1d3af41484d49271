"""loguru setup for the glossary tooling.

Every record carries a ``step`` field (``validate``, ``export``, ...) that
defaults to ``-`` outside a pipeline step.
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from typing import Any, Iterator

from loguru import logger

from ..config.settings import Settings, get_settings

_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[step]}</magenta> | "
    "{message}"
)
_DEFAULT_EXTRA = {"step": "-"}

logger.configure(extra=_DEFAULT_EXTRA)


def configure_logging(
    settings: Settings | None = None,
    level: str = "INFO",
    *,
    log_to_file: bool = True,
) -> None:
    """Replace all sinks with stderr and, optionally, ``settings.log_file``.

    The file sink rotates at 10 MB and keeps two weeks of logs.
    """

    logger.remove()
    logger.add(sys.stderr, level=level, format=_LOG_FORMAT, backtrace=False, diagnose=False)

    if log_to_file:
        log_file = (settings or get_settings()).log_file
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level,
            format=_LOG_FORMAT,
            rotation="10 MB",
            retention="14 days",
            encoding="utf-8",
        )
    logger.configure(extra=_DEFAULT_EXTRA)


def get_logger(**context: Any):
    return logger.bind(**context)


@contextmanager
def logging_context(**context: Any) -> Iterator[Any]:
    """Attach ``context`` to every record emitted inside the block."""

    with logger.contextualize(**context):
        yield logger


@contextmanager
def log_timing(step: str, *, logger_=logger) -> Iterator[None]:
    """Log how long the block took, in seconds, once it exits."""

    started = time.perf_counter()
    try:
        yield
    finally:
        logger_.info("Step timing", step=step, seconds=round(time.perf_counter() - started, 6))


__all__ = ["configure_logging", "get_logger", "logging_context", "log_timing"]
