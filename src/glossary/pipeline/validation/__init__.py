"""Validation pipeline: structural schema checks and cross-record consistency."""

from __future__ import annotations

from .consistency import (
    ConsistencyChecker,
    ConsistencyError,
    ConsistencyResult,
    check_consistency,
)
from .io import GlossaryLoadError, load_base_glossary, load_glossary
from .main import ValidationOutcome, validate_document, validate_glossary
from .schema import SchemaError, SchemaResult, validate_schema

__all__ = [
    "validate_schema",
    "SchemaResult",
    "SchemaError",
    "check_consistency",
    "ConsistencyChecker",
    "ConsistencyResult",
    "ConsistencyError",
    "validate_document",
    "validate_glossary",
    "ValidationOutcome",
    "GlossaryLoadError",
    "load_glossary",
    "load_base_glossary",
]
