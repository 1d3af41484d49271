"""Export pipeline: canonical, versioned JSON publication of the glossary."""

from __future__ import annotations

from .exporter import (
    ExportArtifact,
    ExportError,
    ExportMetadata,
    ExportOptions,
    build_document,
    check_size_limit,
    export_document,
    format_timestamp,
    has_new_slugs,
    prepare_terms,
    render_export,
    serialize_document,
    sort_terms,
)
from .io import extract_slugs, load_previous_slugs, write_export
from .main import ExportOutcome, export_glossary
from .sorting import canonicalize_source, dump_source, is_canonical, sort_glossary_file

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
    "extract_slugs",
    "load_previous_slugs",
    "write_export",
    "ExportOutcome",
    "export_glossary",
    "canonicalize_source",
    "is_canonical",
    "dump_source",
    "sort_glossary_file",
]
