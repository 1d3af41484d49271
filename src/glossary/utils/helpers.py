"""General-purpose filesystem helpers for the outer I/O layer."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .logging import get_logger

_LOGGER = get_logger(module=__name__)


def ensure_directory(path: Path | str) -> Path:
    """Ensure that a directory exists and return the resolved Path."""

    target = Path(path)
    target.mkdir(parents=True, exist_ok=True)
    return target.resolve()


def write_text_atomic(destination: Path | str, text: str) -> Path:
    """Write ``text`` next to ``destination`` and move it into place.

    Readers never observe a half-written artifact.
    """

    dest_path = Path(destination)
    ensure_directory(dest_path.parent)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{dest_path.name}.", dir=dest_path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        os.replace(tmp_name, dest_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    _LOGGER.debug("Wrote file", path=str(dest_path), size=dest_path.stat().st_size)
    return dest_path


__all__ = ["ensure_directory", "write_text_atomic"]
