"""Core domain entities shared by validation, scoring and export."""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

SLUG_PATTERN = r"^[a-z0-9]+(-[a-z0-9]+)*$"
SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 48
DEFINITION_MIN_LENGTH = 80

# Canonical key order for serialized terms; TermRecord declares its fields in
# this order so ``model_dump`` preserves it.
TERM_KEY_ORDER: Tuple[str, ...] = (
    "slug",
    "term",
    "definition",
    "explanation",
    "humor",
    "see_also",
    "tags",
    "aliases",
    "controversy_level",
)


class ControversyLevel(str, Enum):
    """How heated the community debate around a term is."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def slug_problems(slug: str) -> List[str]:
    """Return every slug rule that ``slug`` breaks, in a fixed order."""

    problems: List[str] = []
    if len(slug) < SLUG_MIN_LENGTH:
        problems.append(f"must be at least {SLUG_MIN_LENGTH} characters long")
    if len(slug) > SLUG_MAX_LENGTH:
        problems.append(f"must be at most {SLUG_MAX_LENGTH} characters long")
    if not re.fullmatch(SLUG_PATTERN, slug):
        problems.append(
            f"must contain only lowercase letters, numbers, and single hyphens (pattern: {SLUG_PATTERN})"
        )
    return problems


def _require_non_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class TermRecord(BaseModel):
    """One glossary entry. The record is closed: unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    slug: StrictStr = Field(..., description="Canonical, immutable, URL-safe identifier.")
    term: StrictStr = Field(..., min_length=1, description="Display name")
    definition: StrictStr = Field(..., min_length=DEFINITION_MIN_LENGTH)
    explanation: StrictStr | None = Field(default=None)
    humor: StrictStr | None = Field(default=None)
    see_also: List[StrictStr] | None = Field(default=None)
    tags: List[StrictStr] | None = Field(default=None)
    aliases: List[StrictStr] | None = Field(default=None)
    controversy_level: ControversyLevel | None = Field(default=None)

    @field_validator("slug")
    @classmethod
    def _slug_rules(cls, value: str) -> str:
        # Every broken rule goes into one message; pydantic keeps one error per field.
        problems = slug_problems(value)
        if problems:
            raise ValueError("; ".join(problems))
        return value

    @field_validator("term", "definition", "explanation", "humor")
    @classmethod
    def _non_blank_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _require_non_blank(value)

    @field_validator("see_also", "tags", "aliases")
    @classmethod
    def _non_blank_entries(cls, value: List[str] | None) -> List[str] | None:
        if value is None:
            return None
        for entry in value:
            if not entry.strip():
                raise ValueError("entries must not be blank")
        return value

    def names(self) -> List[str]:
        """Return the display name followed by every alias."""

        return [self.term, *(self.aliases or [])]

    def to_payload(self) -> Dict[str, Any]:
        """Serialize in canonical key order, dropping absent optional fields."""

        return self.model_dump(mode="json", exclude_none=True)


class Snapshot(BaseModel):
    """Immutable point-in-time glossary state: ordered terms plus redirects."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    terms: Tuple[TermRecord, ...]
    redirects: Dict[StrictStr, StrictStr] = Field(default_factory=dict)

    @field_validator("terms", mode="before")
    @classmethod
    def _require_list(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            raise ValueError("terms must be an array")
        return value

    @field_validator("redirects", mode="before")
    @classmethod
    def _null_redirects(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def slugs(self) -> List[str]:
        return [term.slug for term in self.terms]

    @property
    def slug_set(self) -> FrozenSet[str]:
        return frozenset(self.slugs)

    def get(self, slug: str) -> TermRecord | None:
        for term in self.terms:
            if term.slug == slug:
                return term
        return None


class ExportDocument(BaseModel):
    """Versioned, canonicalized publication artifact."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: StrictStr = Field(..., min_length=1)
    generated_at: StrictStr = Field(..., description="ISO-8601 timestamp")
    terms_count: StrictInt = Field(..., ge=0)
    terms: List[TermRecord]

    @field_validator("version")
    @classmethod
    def _non_blank_version(cls, value: str) -> str:
        return _require_non_blank(value)

    @field_validator("generated_at")
    @classmethod
    def _iso_timestamp(cls, value: str) -> str:
        try:
            datetime.fromisoformat(value)
        except ValueError as exc:
            raise ValueError("must be an ISO-8601 date-time") from exc
        return value

    @model_validator(mode="after")
    def _count_matches(self) -> "ExportDocument":
        if self.terms_count != len(self.terms):
            raise ValueError(
                f"terms_count {self.terms_count} does not match {len(self.terms)} terms"
            )
        return self

    def to_payload(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "generated_at": self.generated_at,
            "terms_count": self.terms_count,
            "terms": [term.to_payload() for term in self.terms],
        }


class SchemaViolation(BaseModel):
    """A single structural problem found in a raw glossary document."""

    model_config = ConfigDict(frozen=True)

    location: str = Field(..., min_length=1, description="JSON-pointer style path or '(root)'")
    message: str = Field(..., min_length=1)
    code: str = Field(default="invalid")

    def __str__(self) -> str:
        return f"{self.location} {self.message}"


class Badge(str, Enum):
    """Qualitative labels derived from a term's score or metadata."""

    COMEDY_GOLD = "Comedy Gold"
    FLAME_WARRIOR = "Flame Warrior"
    SPICY_TAKE = "Spicy Take"
    PERFECTIONIST = "Perfectionist"
    STAR_CONTRIBUTOR = "Star Contributor"
    STRONG_ENTRY = "Strong Entry"

    @property
    def icon(self) -> str:
        return _BADGE_ICONS[self]

    def __str__(self) -> str:
        return self.value


_BADGE_ICONS: Dict[Badge, str] = {
    Badge.COMEDY_GOLD: "\U0001F602",
    Badge.FLAME_WARRIOR: "\U0001F525",
    Badge.SPICY_TAKE: "\U0001F336️",
    Badge.PERFECTIONIST: "\U0001F4AF",
    Badge.STAR_CONTRIBUTOR: "⭐",
    Badge.STRONG_ENTRY: "\U0001F4AA",
}


class ScoreResult(BaseModel):
    """Bounded quality score plus earned badges for one term."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    badges: List[Badge] = Field(default_factory=list)


class ScoreBreakdown(BaseModel):
    """Per-component contributions to a term's score."""

    model_config = ConfigDict(frozen=True)

    base: int = Field(default=0, ge=0)
    humor: int = Field(default=0, ge=0)
    explanation: int = Field(default=0, ge=0)
    tags: int = Field(default=0, ge=0)
    cross_references: int = Field(default=0, ge=0)
    max_scores: Dict[str, int] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        return min(
            100,
            self.base + self.humor + self.explanation + self.tags + self.cross_references,
        )


__all__ = [
    "SLUG_PATTERN",
    "slug_problems",
    "SLUG_MIN_LENGTH",
    "SLUG_MAX_LENGTH",
    "DEFINITION_MIN_LENGTH",
    "TERM_KEY_ORDER",
    "ControversyLevel",
    "TermRecord",
    "Snapshot",
    "ExportDocument",
    "SchemaViolation",
    "Badge",
    "ScoreResult",
    "ScoreBreakdown",
]
