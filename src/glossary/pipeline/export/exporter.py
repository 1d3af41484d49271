"""Canonical, versioned export of a validated glossary.

Unlike validation, export is all-or-nothing: the first problem raises
:class:`ExportError` and no artifact is produced.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, List, Literal, Mapping, Sequence

from pydantic import ValidationError

from ...config.policies import DEFAULT_SIZE_THRESHOLD_BYTES, ExportPolicy
from ...entities.core import ExportDocument, Snapshot, TermRecord
from ...utils.logging import get_logger
from ...utils.normalization import TermNormalizationError, normalize_term
from ..validation.schema import to_violation

_LOGGER = get_logger(module=__name__)


class ExportError(Exception):
    """Raised when the export cannot produce a valid artifact."""


@dataclass(frozen=True)
class ExportMetadata:
    """Caller-supplied provenance for an export (build version and clock)."""

    version: str
    generated_at: datetime | str


@dataclass(frozen=True)
class ExportOptions:
    """Serialization and guard settings for one export call."""

    pretty: bool = False
    size_threshold_bytes: int = DEFAULT_SIZE_THRESHOLD_BYTES
    oversize_action: Literal["error", "warn"] = "error"
    only_if_new: bool = False

    @classmethod
    def from_policy(cls, policy: ExportPolicy, **overrides: Any) -> "ExportOptions":
        values = {
            "pretty": policy.pretty,
            "size_threshold_bytes": policy.size_threshold_bytes,
            "oversize_action": policy.oversize_action,
            "only_if_new": policy.only_if_new,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


@dataclass(frozen=True)
class ExportArtifact:
    """A built document together with its serialized form."""

    document: ExportDocument
    serialized: str
    size_bytes: int
    oversized: bool


def format_timestamp(value: datetime | str) -> str:
    """Render ``value`` as a UTC ISO-8601 string with millisecond precision.

    Naive datetimes are taken to be UTC.
    """

    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise ExportError(f"generated_at '{value}' is not an ISO-8601 timestamp") from exc
    if not isinstance(value, datetime):
        raise ExportError("generated_at must be a datetime or an ISO-8601 string")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    rendered = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


def sort_terms(terms: Iterable[TermRecord]) -> List[TermRecord]:
    """Return a new list of terms ordered by slug."""

    return sorted(terms, key=lambda term: term.slug)


def prepare_terms(raw_terms: Any) -> List[TermRecord]:
    """Normalize every term and sort the result by slug."""

    if not isinstance(raw_terms, (list, tuple)):
        raise ExportError('Root "terms" must be an array')

    normalized: List[TermRecord] = []
    for raw in raw_terms:
        try:
            normalized.append(normalize_term(raw))
        except TermNormalizationError as exc:
            raise ExportError(str(exc)) from exc
    return sort_terms(normalized)


def format_validation_errors(exc: ValidationError) -> str:
    return "; ".join(str(to_violation(error)) for error in exc.errors()) or "Unknown validation error"


def build_document(terms: Sequence[TermRecord], metadata: ExportMetadata) -> ExportDocument:
    """Assemble the export document and validate it against the closed schema."""

    payload = {
        "version": metadata.version,
        "generated_at": format_timestamp(metadata.generated_at),
        "terms_count": len(terms),
        "terms": [term.to_payload() for term in terms],
    }
    try:
        return ExportDocument.model_validate(payload)
    except ValidationError as exc:
        raise ExportError(format_validation_errors(exc)) from exc


def serialize_document(document: ExportDocument, *, pretty: bool = False) -> str:
    """Serialize to JSON with a trailing newline, compact unless ``pretty``."""

    if pretty:
        text = json.dumps(document.to_payload(), indent=2, ensure_ascii=False)
    else:
        text = json.dumps(document.to_payload(), separators=(",", ":"), ensure_ascii=False)
    return text + "\n"


def check_size_limit(
    serialized: str,
    threshold_bytes: int = DEFAULT_SIZE_THRESHOLD_BYTES,
    action: Literal["error", "warn"] = "error",
) -> bool:
    """Return True when the UTF-8 size exceeds the threshold.

    With ``action="error"`` an oversized export raises :class:`ExportError`;
    with ``"warn"`` it is logged and the caller decides.
    """

    size = len(serialized.encode("utf-8"))
    if size <= threshold_bytes:
        return False
    message = f"Export size {size} bytes exceeds {threshold_bytes} byte limit"
    if action == "error":
        raise ExportError(message)
    _LOGGER.warning(message)
    return True


def _raw_terms(source: Snapshot | Mapping[str, Any]) -> Any:
    if isinstance(source, Snapshot):
        return list(source.terms)
    if isinstance(source, Mapping):
        return source.get("terms")
    raise ExportError("Glossary document must be an object with a terms array")


def render_export(
    source: Snapshot | Mapping[str, Any],
    metadata: ExportMetadata,
    options: ExportOptions | None = None,
) -> ExportArtifact:
    """Build, serialize and size-check an export in one fail-fast pass."""

    options = options or ExportOptions()
    terms = prepare_terms(_raw_terms(source))
    document = build_document(terms, metadata)
    serialized = serialize_document(document, pretty=options.pretty)
    oversized = check_size_limit(
        serialized,
        options.size_threshold_bytes,
        options.oversize_action,
    )
    _LOGGER.debug(
        "Rendered export",
        terms=document.terms_count,
        size=len(serialized.encode("utf-8")),
    )
    return ExportArtifact(
        document=document,
        serialized=serialized,
        size_bytes=len(serialized.encode("utf-8")),
        oversized=oversized,
    )


def export_document(
    source: Snapshot | Mapping[str, Any],
    metadata: ExportMetadata,
    options: ExportOptions | None = None,
) -> ExportDocument:
    """Return the validated export document for ``source``."""

    return render_export(source, metadata, options).document


def _slug_set(source: Snapshot | Iterable[str]) -> set[str]:
    if isinstance(source, Snapshot):
        return set(source.slug_set)
    return {slug for slug in source if isinstance(slug, str)}


def has_new_slugs(
    current: Snapshot | Iterable[str],
    previous: Snapshot | Iterable[str] | None,
) -> bool:
    """Return True when ``current`` holds a slug that ``previous`` lacks.

    Removed or edited slugs alone never count. Without a previous state
    every snapshot counts as new.
    """

    if previous is None:
        return True
    return bool(_slug_set(current) - _slug_set(previous))


__all__ = [
    "ExportError",
    "ExportMetadata",
    "ExportOptions",
    "ExportArtifact",
    "format_timestamp",
    "sort_terms",
    "prepare_terms",
    "build_document",
    "serialize_document",
    "check_size_limit",
    "render_export",
    "export_document",
    "has_new_slugs",
]
