"""Quality scoring for glossary terms.

A term earns points from five independently capped components whose maxima
add up to exactly 100. Badges are derived from the total and from the
term's controversy level.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple

from ..entities.core import Badge, ControversyLevel, ScoreBreakdown, ScoreResult, Snapshot, TermRecord
from ..utils.normalization import normalize_string

MAX_SCORES: Dict[str, int] = {
    "base": 20,
    "humor": 30,
    "explanation": 20,
    "tags": 10,
    "cross_references": 20,
}
MAX_TOTAL = 100

HUMOR_CHARS_PER_POINT = 5
COMEDY_GOLD_MIN_LENGTH = 100
EXPLANATION_MIN_LENGTH = 20
POINTS_PER_TAG = 3
POINTS_PER_CROSS_REFERENCE = 5

# Highest threshold wins; at most one achievement badge is awarded.
_ACHIEVEMENTS: Tuple[Tuple[int, Badge], ...] = (
    (90, Badge.PERFECTIONIST),
    (80, Badge.STAR_CONTRIBUTOR),
    (70, Badge.STRONG_ENTRY),
)

_CONTROVERSY_BADGES: Dict[ControversyLevel, Badge] = {
    ControversyLevel.HIGH: Badge.FLAME_WARRIOR,
    ControversyLevel.MEDIUM: Badge.SPICY_TAKE,
}


def _field(term: TermRecord | Mapping[str, Any], name: str) -> Any:
    if isinstance(term, Mapping):
        return term.get(name)
    return getattr(term, name, None)


def _text(term: TermRecord | Mapping[str, Any], name: str) -> str | None:
    value = _field(term, name)
    if isinstance(value, str) and normalize_string(value) is not None:
        return value
    return None


def _count(term: TermRecord | Mapping[str, Any], name: str) -> int:
    value = _field(term, name)
    if not isinstance(value, (list, tuple)):
        return 0
    return sum(1 for entry in value if isinstance(entry, str) and normalize_string(entry))


def _controversy(term: TermRecord | Mapping[str, Any]) -> ControversyLevel | None:
    value = _field(term, "controversy_level")
    if isinstance(value, ControversyLevel):
        return value
    text = normalize_string(value) if isinstance(value, str) else None
    if text is None:
        return None
    try:
        return ControversyLevel(text)
    except ValueError:
        return None


def score_breakdown(term: TermRecord | Mapping[str, Any]) -> ScoreBreakdown:
    """Return each scoring component for ``term``."""

    base = MAX_SCORES["base"] if _text(term, "term") and _text(term, "definition") else 0

    humor_text = _text(term, "humor")
    humor = 0
    if humor_text is not None:
        humor = min(MAX_SCORES["humor"], len(humor_text) // HUMOR_CHARS_PER_POINT)

    explanation_text = _text(term, "explanation")
    explanation = 0
    if explanation_text is not None and len(explanation_text) > EXPLANATION_MIN_LENGTH:
        explanation = MAX_SCORES["explanation"]

    tags = min(MAX_SCORES["tags"], POINTS_PER_TAG * _count(term, "tags"))
    cross_references = min(
        MAX_SCORES["cross_references"],
        POINTS_PER_CROSS_REFERENCE * _count(term, "see_also"),
    )

    return ScoreBreakdown(
        base=base,
        humor=humor,
        explanation=explanation,
        tags=tags,
        cross_references=cross_references,
        max_scores=dict(MAX_SCORES),
    )


def score_term(term: TermRecord | Mapping[str, Any]) -> ScoreResult:
    """Score a term in the range 0..100 and collect its badges."""

    total = min(MAX_TOTAL, score_breakdown(term).total)
    badges: List[Badge] = []

    humor_text = _text(term, "humor")
    if humor_text is not None and len(humor_text) > COMEDY_GOLD_MIN_LENGTH:
        badges.append(Badge.COMEDY_GOLD)

    controversy_badge = _CONTROVERSY_BADGES.get(_controversy(term))
    if controversy_badge is not None:
        badges.append(controversy_badge)

    for threshold, badge in _ACHIEVEMENTS:
        if total >= threshold:
            badges.append(badge)
            break

    return ScoreResult(score=total, badges=badges)


def score_snapshot(snapshot: Snapshot) -> Dict[str, ScoreResult]:
    """Score every term of a snapshot, keyed by slug."""

    return {term.slug: score_term(term) for term in snapshot.terms}


def latest_term_score(snapshot: Snapshot) -> Tuple[TermRecord, ScoreResult] | None:
    """Score the most recently appended term, if any."""

    if not snapshot.terms:
        return None
    latest = snapshot.terms[-1]
    return latest, score_term(latest)


__all__ = [
    "MAX_SCORES",
    "MAX_TOTAL",
    "score_breakdown",
    "score_term",
    "score_snapshot",
    "latest_term_score",
]
