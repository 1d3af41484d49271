"""Domain entities for the glossary tooling."""

from .core import (
    DEFINITION_MIN_LENGTH,
    SLUG_MAX_LENGTH,
    SLUG_MIN_LENGTH,
    SLUG_PATTERN,
    TERM_KEY_ORDER,
    Badge,
    ControversyLevel,
    ExportDocument,
    SchemaViolation,
    ScoreBreakdown,
    ScoreResult,
    Snapshot,
    TermRecord,
    slug_problems,
)

__all__ = [
    "SLUG_PATTERN",
    "SLUG_MIN_LENGTH",
    "SLUG_MAX_LENGTH",
    "DEFINITION_MIN_LENGTH",
    "TERM_KEY_ORDER",
    "slug_problems",
    "ControversyLevel",
    "TermRecord",
    "Snapshot",
    "ExportDocument",
    "SchemaViolation",
    "Badge",
    "ScoreResult",
    "ScoreBreakdown",
]
