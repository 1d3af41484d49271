"""Cross-record consistency checks for validated glossary snapshots.

Every check indexes the terms in a dictionary keyed by slug or normalized
name, so a snapshot of a few hundred records is checked in linear time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Tuple

from ...entities.core import Snapshot, TermRecord
from ...utils.logging import get_logger
from ...utils.normalization import normalize_name

_LOGGER = get_logger(module=__name__)


class ConsistencyError(Exception):
    """Raised with the complete list of consistency violations."""

    def __init__(self, violations: Iterable[str]) -> None:
        self.violations: List[str] = list(violations)
        super().__init__(
            f"Consistency check failed with {len(self.violations)} violation(s)"
        )


@dataclass
class ConsistencyResult:
    """Outcome of the consistency checks."""

    passed: bool
    violations: List[str] = field(default_factory=list)
    summary: str = ""

    def raise_for_errors(self) -> None:
        if not self.passed:
            raise ConsistencyError(self.violations)


@dataclass(frozen=True, slots=True)
class NameClaim:
    """First term that claimed a normalized name."""

    position: int
    kind: str
    label: str
    slug: str
    display: str

    def describe(self) -> str:
        return f"{_position(self.position)} {self.kind} '{self.label}'"


def _position(index: int) -> str:
    return f"term #{index + 1}"


def _claims_from_term(index: int, term: TermRecord) -> Iterator[NameClaim]:
    yield NameClaim(index, "term", term.term, term.slug, term.term)
    for alias in term.aliases or []:
        yield NameClaim(index, "alias", alias, term.slug, term.term)


def _claims_from_raw(index: int, term: Any) -> Iterator[NameClaim]:
    """Yield claims from a loosely-shaped base entry, skipping malformed data."""

    if not isinstance(term, Mapping):
        return
    slug = term.get("slug")
    if not isinstance(slug, str) or not slug:
        return
    display = term.get("term")
    display = display if isinstance(display, str) and display else slug
    if isinstance(term.get("term"), str):
        yield NameClaim(index, "term", term["term"], slug, display)
    aliases = term.get("aliases")
    if isinstance(aliases, list):
        for alias in aliases:
            if isinstance(alias, str):
                yield NameClaim(index, "alias", alias, slug, display)


def _base_claims(base: Snapshot | Mapping[str, Any]) -> Iterator[NameClaim]:
    if isinstance(base, Snapshot):
        for index, term in enumerate(base.terms):
            yield from _claims_from_term(index, term)
        return
    terms = base.get("terms")
    if not isinstance(terms, list):
        return
    for index, term in enumerate(terms):
        yield from _claims_from_raw(index, term)


class ConsistencyChecker:
    """Detects duplicates, slug renames and broken redirects."""

    def check(
        self,
        snapshot: Snapshot,
        base: Snapshot | Mapping[str, Any] | None = None,
    ) -> ConsistencyResult:
        """Run every check and collect all violations in a single report."""

        violations: List[str] = []
        slug_positions, slug_violations = self.check_duplicate_slugs(snapshot)
        violations.extend(slug_violations)

        name_index, name_violations = self.check_duplicate_names(snapshot)
        violations.extend(name_violations)

        if base is not None:
            violations.extend(self.check_slug_immutability(name_index, base))

        violations.extend(self.check_redirects(snapshot, slug_positions))

        passed = not violations
        summary = (
            f"{len(snapshot.terms)} terms are consistent"
            if passed
            else f"{len(violations)} consistency violation(s)"
        )
        _LOGGER.debug(
            "Consistency check finished",
            terms=len(snapshot.terms),
            violations=len(violations),
            with_base=base is not None,
        )
        return ConsistencyResult(passed=passed, violations=violations, summary=summary)

    def check_duplicate_slugs(self, snapshot: Snapshot) -> Tuple[Dict[str, int], List[str]]:
        positions: Dict[str, int] = {}
        violations: List[str] = []
        for index, term in enumerate(snapshot.terms):
            first = positions.get(term.slug)
            if first is not None:
                violations.append(
                    f"{_position(index)} slug '{term.slug}' duplicates {_position(first)}"
                )
                continue
            positions[term.slug] = index
        return positions, violations

    def check_duplicate_names(
        self, snapshot: Snapshot
    ) -> Tuple[Dict[str, NameClaim], List[str]]:
        index_by_name: Dict[str, NameClaim] = {}
        violations: List[str] = []
        for index, term in enumerate(snapshot.terms):
            for claim in _claims_from_term(index, term):
                key = normalize_name(claim.label)
                if not key:
                    continue
                previous = index_by_name.get(key)
                if previous is None:
                    index_by_name[key] = claim
                elif previous.position != claim.position:
                    violations.append(f"{claim.describe()} conflicts with {previous.describe()}")
        return index_by_name, violations

    def check_slug_immutability(
        self,
        name_index: Mapping[str, NameClaim],
        base: Snapshot | Mapping[str, Any],
    ) -> List[str]:
        """Report published names whose slug changed since ``base``.

        Names are matched by their normalized form. One violation is emitted per
        distinct ``(old slug, new slug)`` pair: when several names of a term
        match the same rename they would produce identical messages, so only
        the first is kept. A term whose names moved to different slugs yields
        one violation per new slug.
        """

        base_index: Dict[str, NameClaim] = {}
        for claim in _base_claims(base):
            key = normalize_name(claim.label)
            if key and key not in base_index:
                base_index[key] = claim

        violations: List[str] = []
        reported: set[Tuple[str, str]] = set()
        for key, claim in name_index.items():
            published = base_index.get(key)
            if published is None or published.slug == claim.slug:
                continue
            rename = (published.slug, claim.slug)
            if rename in reported:
                continue
            reported.add(rename)
            violations.append(
                f"Slug immutability violation: slug for term '{published.display}' changed "
                f"from '{published.slug}' to '{claim.slug}'; add a redirect "
                f"'{published.slug} -> {claim.slug}' to keep the old URL working"
            )
        return violations

    def check_redirects(
        self, snapshot: Snapshot, slug_positions: Mapping[str, int]
    ) -> List[str]:
        violations: List[str] = []
        for source, target in snapshot.redirects.items():
            if source in slug_positions:
                violations.append(
                    f"Redirect source '{source}' conflicts with an active term slug"
                )
            if target not in slug_positions:
                violations.append(f"Redirect target '{target}' does not exist in terms")
        return violations


def check_consistency(
    snapshot: Snapshot,
    base: Snapshot | Mapping[str, Any] | None = None,
) -> ConsistencyResult:
    """Convenience wrapper around :class:`ConsistencyChecker`."""

    return ConsistencyChecker().check(snapshot, base)


__all__ = [
    "ConsistencyError",
    "ConsistencyResult",
    "ConsistencyChecker",
    "NameClaim",
    "check_consistency",
]
