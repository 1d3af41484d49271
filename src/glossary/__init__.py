"""Consistency checking, scoring and publication for glossary terms."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("foss-glossary")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.1.0"

from .config.settings import Settings, get_settings
from .entities import (
    Badge,
    ControversyLevel,
    ExportDocument,
    SchemaViolation,
    ScoreBreakdown,
    ScoreResult,
    Snapshot,
    TermRecord,
)
from .pipeline.export import (
    ExportError,
    ExportMetadata,
    ExportOptions,
    export_document,
    has_new_slugs,
)
from .pipeline.validation import (
    ConsistencyError,
    ConsistencyResult,
    SchemaError,
    SchemaResult,
    check_consistency,
    validate_schema,
)
from .scoring import score_breakdown, score_term
from .utils.normalization import normalize_name, normalize_term

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "TermRecord",
    "Snapshot",
    "ExportDocument",
    "SchemaViolation",
    "ControversyLevel",
    "Badge",
    "ScoreResult",
    "ScoreBreakdown",
    "validate_schema",
    "SchemaResult",
    "SchemaError",
    "check_consistency",
    "ConsistencyResult",
    "ConsistencyError",
    "score_term",
    "score_breakdown",
    "export_document",
    "has_new_slugs",
    "ExportMetadata",
    "ExportOptions",
    "ExportError",
    "normalize_name",
    "normalize_term",
]
