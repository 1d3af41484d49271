"""Entry-point helpers for executing the validation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping

from ...config.settings import Settings, get_settings
from ...entities.core import Snapshot
from ...utils.logging import get_logger, log_timing, logging_context
from .consistency import ConsistencyResult, check_consistency
from .io import load_base_glossary, load_glossary
from .schema import SchemaResult, validate_schema

_LOGGER = get_logger(module=__name__)


@dataclass
class ValidationOutcome:
    """Combined schema and consistency result for one glossary document."""

    schema: SchemaResult
    consistency: ConsistencyResult | None = None
    messages: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.schema.passed and self.consistency is not None and self.consistency.passed

    @property
    def snapshot(self) -> Snapshot | None:
        return self.schema.snapshot


def validate_document(
    raw: Any,
    base: Snapshot | Mapping[str, Any] | None = None,
) -> ValidationOutcome:
    """Run schema validation and, when it passes, the consistency checks."""

    schema_result = validate_schema(raw)
    if not schema_result.passed or schema_result.snapshot is None:
        return ValidationOutcome(schema=schema_result, messages=schema_result.messages)

    consistency = check_consistency(schema_result.snapshot, base)
    return ValidationOutcome(
        schema=schema_result,
        consistency=consistency,
        messages=list(consistency.violations),
    )


def validate_glossary(
    terms_path: str | Path | None = None,
    *,
    base_path: str | Path | None = None,
    settings: Settings | None = None,
) -> ValidationOutcome:
    """Load the glossary (and optional base) from disk and validate it."""

    settings = settings or get_settings()
    source = Path(terms_path or settings.paths.terms_file)
    base_source = base_path or settings.policies.validation.base_terms_path

    with logging_context(step="validate"), log_timing("validate"):
        raw = load_glossary(source)
        base = load_base_glossary(base_source)
        if base is not None and not isinstance(base, Mapping):
            _LOGGER.warning("Base glossary is not an object; skipping slug change checks")
            base = None
        outcome = validate_document(raw, base)

    if outcome.passed:
        _LOGGER.info(
            "Validation passed",
            path=str(source),
            terms=len(outcome.snapshot.terms) if outcome.snapshot else 0,
        )
    else:
        _LOGGER.info("Validation failed", path=str(source), violations=len(outcome.messages))
    return outcome


__all__ = ["ValidationOutcome", "validate_document", "validate_glossary"]
