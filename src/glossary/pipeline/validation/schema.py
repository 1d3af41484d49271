"""Structural validation of raw glossary documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Sequence

from pydantic import ValidationError

from ...entities.core import SchemaViolation, Snapshot
from ...utils.logging import get_logger

_LOGGER = get_logger(module=__name__)

ROOT_LOCATION = "(root)"

_TYPE_MESSAGES = {
    "model_type": "must be an object",
    "model_attributes_type": "must be an object",
    "dict_type": "must be an object",
}


class SchemaError(Exception):
    """Raised with the complete list of structural violations."""

    def __init__(self, violations: Iterable[SchemaViolation]) -> None:
        self.violations: List[SchemaViolation] = list(violations)
        super().__init__(
            f"Schema validation failed with {len(self.violations)} violation(s)"
        )


@dataclass
class SchemaResult:
    """Outcome of structural validation."""

    passed: bool
    snapshot: Snapshot | None
    errors: List[SchemaViolation] = field(default_factory=list)

    @property
    def messages(self) -> List[str]:
        return [str(error) for error in self.errors]

    def raise_for_errors(self) -> Snapshot:
        """Return the validated snapshot or raise :class:`SchemaError`."""

        if not self.passed or self.snapshot is None:
            raise SchemaError(self.errors)
        return self.snapshot


def format_location(loc: Sequence[Any]) -> str:
    """Render a pydantic error location as a JSON-pointer style path."""

    if not loc:
        return ROOT_LOCATION
    return "/" + "/".join(str(part) for part in loc)


def to_violation(error: Mapping[str, Any]) -> SchemaViolation:
    loc = tuple(error.get("loc", ()))
    kind = error.get("type", "invalid")

    if kind == "extra_forbidden" and loc:
        return SchemaViolation(
            location=format_location(loc[:-1]),
            message=f"has unexpected property '{loc[-1]}'",
            code="additional_property",
        )
    if kind == "missing" and loc:
        return SchemaViolation(
            location=format_location(loc[:-1]),
            message=f"missing required property '{loc[-1]}'",
            code="required",
        )

    message = _TYPE_MESSAGES.get(kind) or str(error.get("msg", "validation error"))
    if message.startswith("Value error, "):
        message = message[len("Value error, ") :]
    return SchemaViolation(location=format_location(loc), message=message, code=kind)


def validate_schema(raw: Any) -> SchemaResult:
    """Check a parsed document against the closed glossary schema.

    Every violation is collected; the function never raises for bad input.
    """

    if not isinstance(raw, Mapping):
        violation = SchemaViolation(
            location=ROOT_LOCATION,
            message="must be an object with a 'terms' array",
            code="root_type",
        )
        return SchemaResult(passed=False, snapshot=None, errors=[violation])

    try:
        snapshot = Snapshot.model_validate(dict(raw))
    except ValidationError as exc:
        errors = [to_violation(error) for error in exc.errors()]
        _LOGGER.debug("Schema validation failed", violations=len(errors))
        return SchemaResult(passed=False, snapshot=None, errors=errors)

    _LOGGER.debug("Schema validation passed", terms=len(snapshot.terms))
    return SchemaResult(passed=True, snapshot=snapshot)


__all__ = [
    "ROOT_LOCATION",
    "SchemaError",
    "SchemaResult",
    "format_location",
    "to_violation",
    "validate_schema",
]
