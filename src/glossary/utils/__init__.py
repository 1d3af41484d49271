"""Utility helpers shared across glossary modules."""

from .helpers import ensure_directory, write_text_atomic
from .logging import configure_logging, get_logger, log_timing, logging_context
from .normalization import (
    TermNormalizationError,
    normalize_array,
    normalize_name,
    normalize_string,
    normalize_term,
    strip_non_ascii_alnum,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "log_timing",
    "logging_context",
    "ensure_directory",
    "write_text_atomic",
    "TermNormalizationError",
    "strip_non_ascii_alnum",
    "normalize_name",
    "normalize_string",
    "normalize_array",
    "normalize_term",
]
