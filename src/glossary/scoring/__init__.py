"""Quality scoring and badge assignment for glossary terms."""

from .scorer import (
    MAX_SCORES,
    MAX_TOTAL,
    latest_term_score,
    score_breakdown,
    score_snapshot,
    score_term,
)

__all__ = [
    "MAX_SCORES",
    "MAX_TOTAL",
    "score_term",
    "score_breakdown",
    "score_snapshot",
    "latest_term_score",
]
