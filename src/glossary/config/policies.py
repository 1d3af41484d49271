"""Policy configuration primitives for glossary validation and publication."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_SIZE_THRESHOLD_BYTES = 2 * 1024 * 1024


class ValidationPolicy(BaseModel):
    """Controls for the consistency checks run before publication."""

    base_terms_path: Optional[Path] = Field(
        default=None,
        description="Previously published glossary used for slug immutability checks.",
    )

    @field_validator("base_terms_path", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ExportPolicy(BaseModel):
    """Serialization and gating rules for the published JSON artifact."""

    pretty: bool = Field(default=False, description="Indent the exported JSON.")
    size_threshold_bytes: int = Field(
        default=DEFAULT_SIZE_THRESHOLD_BYTES,
        gt=0,
        description="Serialized size above which the export is refused or flagged.",
    )
    oversize_action: Literal["error", "warn"] = Field(
        default="error",
        description="Whether an oversized export aborts or only logs a warning.",
    )
    only_if_new: bool = Field(
        default=False,
        description="Skip the export unless a slug was added since the previous snapshot.",
    )
    version_label: str = Field(
        default="local",
        min_length=1,
        description="Version recorded when the caller does not supply one.",
    )


class Policies(BaseModel):
    """Top-level container for every glossary policy."""

    policy_version: str = Field(default="1")
    validation: ValidationPolicy = Field(default_factory=ValidationPolicy)
    export: ExportPolicy = Field(default_factory=ExportPolicy)


def load_policies(data: Dict[str, Any] | None) -> Policies:
    """Build :class:`Policies` from a raw mapping (typically parsed YAML)."""

    return Policies.model_validate(data or {})


__all__ = [
    "DEFAULT_SIZE_THRESHOLD_BYTES",
    "ValidationPolicy",
    "ExportPolicy",
    "Policies",
    "load_policies",
]
