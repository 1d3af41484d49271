"""I/O utilities for loading glossary source documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List

import yaml

from ...utils.logging import get_logger

_LOGGER = get_logger(module=__name__)

_CONTEXT_RADIUS = 2


class GlossaryLoadError(Exception):
    """Raised when a glossary file cannot be read or parsed."""


def _format_yaml_error(path: Path, text: str, exc: yaml.MarkedYAMLError) -> str:
    mark = exc.problem_mark
    line = mark.line + 1
    column = mark.column + 1
    lines = text.splitlines()
    start = max(0, line - 1 - _CONTEXT_RADIUS)
    end = min(len(lines), line + _CONTEXT_RADIUS)
    context: List[str] = []
    for number in range(start + 1, end + 1):
        marker = "→" if number == line else " "
        context.append(f"{marker} {number}: {lines[number - 1]}")

    headline = str(exc.problem or exc).strip()
    return "\n".join(
        [
            f"YAML parse error in {path}",
            f"Line: {line}, Column: {column}",
            "",
            headline,
            "",
            "Context:",
            *context,
            "",
            "Suggested fix: check the indentation of the list item near the marked line;",
            "keys (term, definition, ...) must be indented under '- slug:' using spaces, not tabs.",
        ]
    )


def load_glossary(path: str | Path) -> Any:
    """Parse a YAML (or JSON) glossary document and return the raw data."""

    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise GlossaryLoadError(f"Failed to read {source}: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.MarkedYAMLError as exc:
        if exc.problem_mark is None:
            raise GlossaryLoadError(f"YAML parse error in {source}: {exc}") from exc
        raise GlossaryLoadError(_format_yaml_error(source, text, exc)) from exc
    except yaml.YAMLError as exc:
        raise GlossaryLoadError(f"YAML parse error in {source}: {exc}") from exc

    _LOGGER.debug("Loaded glossary document", path=str(source))
    return data


def load_base_glossary(path: str | Path | None) -> Any | None:
    """Load the previously published glossary, or ``None`` when unavailable.

    A configured but missing base file only disables the slug immutability
    check; it is not an error.
    """

    if path is None:
        return None
    source = Path(path)
    if not source.exists():
        _LOGGER.warning(
            "Base glossary file not found at {path}; skipping slug change checks",
            path=str(source.resolve()),
        )
        return None
    return load_glossary(source)


__all__ = ["GlossaryLoadError", "load_glossary", "load_base_glossary"]
