"""Shared pytest fixtures."""

from __future__ import annotations

import sys

import pytest
from loguru import logger


def _write_to_current_stderr(message: str) -> None:
    sys.stderr.write(message)


@pytest.fixture(autouse=True)
def _reset_log_sinks():
    """Drop sinks added during a test.

    ``configure_logging`` binds to whatever ``sys.stderr`` is at call time, which
    under ``CliRunner`` is a buffer closed once the command returns.
    """

    yield
    logger.remove()
    logger.add(_write_to_current_stderr)
    logger.configure(extra={"step": "-"})
