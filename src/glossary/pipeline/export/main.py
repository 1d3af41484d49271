"""Entry-point helpers for publishing the glossary as JSON."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ...config.settings import Settings, get_settings
from ...entities.core import ExportDocument
from ...utils.logging import get_logger, log_timing, logging_context
from ..validation.io import load_glossary
from .exporter import (
    ExportError,
    ExportMetadata,
    ExportOptions,
    has_new_slugs,
    render_export,
)
from .io import extract_slugs, load_previous_slugs, write_export

_LOGGER = get_logger(module=__name__)


@dataclass
class ExportOutcome:
    """What an export run did."""

    written: bool
    skipped: bool
    document: ExportDocument | None = None
    path: Path | None = None
    size_bytes: int = 0
    oversized: bool = False


def export_glossary(
    terms_path: str | Path | None = None,
    output_path: str | Path | None = None,
    *,
    metadata: ExportMetadata,
    options: ExportOptions | None = None,
    previous_path: str | Path | None = None,
    check: bool = False,
    settings: Settings | None = None,
) -> ExportOutcome:
    """Load the glossary, export it, and write the artifact unless ``check``.

    With ``options.only_if_new`` the export is skipped when no slug was added
    relative to ``previous_path``. Nothing is written when any step fails.
    """

    settings = settings or get_settings()
    options = options or ExportOptions.from_policy(settings.policies.export)
    source = Path(terms_path or settings.paths.terms_file)
    destination = Path(output_path or settings.paths.export_file)

    raw: Any = load_glossary(source)
    if not isinstance(raw, Mapping):
        raise ExportError(f"{source} must contain an object with a terms array")

    if options.only_if_new:
        previous = load_previous_slugs(previous_path)
        if not has_new_slugs(extract_slugs(raw), previous):
            _LOGGER.info("No new terms detected; skipping export")
            return ExportOutcome(written=False, skipped=True)

    with logging_context(step="export"), log_timing("export"):
        artifact = render_export(raw, metadata, options)

    outcome = ExportOutcome(
        written=False,
        skipped=False,
        document=artifact.document,
        size_bytes=artifact.size_bytes,
        oversized=artifact.oversized,
    )
    if check:
        _LOGGER.info("Export validation passed", terms=artifact.document.terms_count)
        return outcome

    outcome.path = write_export(destination, artifact.serialized)
    outcome.written = True
    _LOGGER.info(
        "Wrote {path} ({count} terms)",
        path=str(destination),
        count=artifact.document.terms_count,
    )
    return outcome


__all__ = ["ExportOutcome", "export_glossary"]
