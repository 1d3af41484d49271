"""Tests for name keys and term canonicalization."""

from __future__ import annotations

import unicodedata

import pytest

from glossary.entities.core import ControversyLevel, TermRecord
from glossary.utils.normalization import (
    TermNormalizationError,
    normalize_array,
    normalize_name,
    normalize_string,
    normalize_term,
    strip_non_ascii_alnum,
)

DEFINITION = "A sufficiently long definition that easily clears the eighty character minimum length."


def _raw_term(**overrides) -> dict:
    payload = {"slug": "foo-bar", "term": "Foo Bar", "definition": DEFINITION}
    payload.update(overrides)
    return payload


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Foo Bar", "foobar"),
        ("FOSS", "foss"),
        ("  Open-Source (OSS)!  ", "opensourceoss"),
        ("C++ 20", "c20"),
        ("résumé", "rsum"),
        ("resume", "resume"),
        ("", ""),
    ],
)
def test_normalize_name_examples(raw: str, expected: str) -> None:
    assert normalize_name(raw) == expected


def test_normalize_name_rejects_non_strings() -> None:
    assert normalize_name(None) == ""
    assert normalize_name(42) == ""
    assert normalize_name(["foo"]) == ""


@pytest.mark.parametrize("word", ["café", "résumé", "Ångström", "naïve", "Fußball", "plain"])
def test_normalize_name_is_invariant_under_unicode_reencoding(word: str) -> None:
    composed = unicodedata.normalize("NFC", word)
    decomposed = unicodedata.normalize("NFD", word)
    assert normalize_name(composed) == normalize_name(decomposed)


def test_decomposed_accent_is_dropped_not_kept_as_base_letter() -> None:
    decomposed = "cafe\u0301"
    assert normalize_name(decomposed) == "caf"
    assert normalize_name("caf\u00e9") == "caf"
    assert normalize_name(decomposed) != normalize_name("cafe")


def test_accented_word_and_unaccented_homonym_do_not_collide() -> None:
    assert normalize_name("résumé") != normalize_name("resume")


@pytest.mark.parametrize(
    ("a", "b"),
    [("FOSS", "foss"), ("Foo Bar", "foo-bar"), ("café", "café"), ("Git", "GitHub")],
)
def test_normalize_name_equality_is_symmetric_and_reflexive(a: str, b: str) -> None:
    assert normalize_name(a) == normalize_name(a)
    assert (normalize_name(a) == normalize_name(b)) == (normalize_name(b) == normalize_name(a))


def test_strip_non_ascii_alnum_drops_accented_letters() -> None:
    assert strip_non_ascii_alnum("é-a_1") == "a1"


def test_normalize_string_treats_blank_as_absent() -> None:
    assert normalize_string(None) is None
    assert normalize_string("   ") is None
    assert normalize_string("  value ") == "value"
    assert normalize_string(7) == "7"


def test_normalize_array_trims_and_drops_blank_entries() -> None:
    assert normalize_array([" a ", "", None, "b"]) == ["a", "b"]
    assert normalize_array(["  ", None]) is None
    assert normalize_array([]) is None
    assert normalize_array(None) is None
    assert normalize_array("single") == ["single"]


def test_normalize_term_drops_empty_optional_fields() -> None:
    record = normalize_term(
        _raw_term(
            explanation="   ",
            humor=None,
            tags=[" git ", "", None],
            see_also=["   "],
            aliases=[],
            controversy_level=" high ",
        )
    )

    assert isinstance(record, TermRecord)
    assert record.tags == ["git"]
    assert record.see_also is None
    assert record.aliases is None
    assert record.explanation is None
    assert record.humor is None
    assert record.controversy_level is ControversyLevel.HIGH
    assert list(record.to_payload()) == ["slug", "term", "definition", "tags", "controversy_level"]


def test_normalize_term_trims_required_fields() -> None:
    record = normalize_term(_raw_term(term="  Foo Bar  ", slug=" foo-bar "))
    assert record.term == "Foo Bar"
    assert record.slug == "foo-bar"


def test_normalize_term_accepts_existing_record() -> None:
    record = normalize_term(_raw_term(tags=["a"]))
    assert normalize_term(record) == record


@pytest.mark.parametrize("missing", ["slug", "term", "definition"])
def test_normalize_term_names_missing_required_field(missing: str) -> None:
    raw = _raw_term()
    raw[missing] = "   "
    with pytest.raises(TermNormalizationError, match=missing):
        normalize_term(raw)


@pytest.mark.parametrize(
    ("slug", "fragment"),
    [
        ("Foo-Bar", "lowercase letters"),
        ("foo--bar", "lowercase letters"),
        ("ab", "at least 3"),
        ("a" * 49, "at most 48"),
    ],
)
def test_normalize_term_rejects_bad_slugs(slug: str, fragment: str) -> None:
    with pytest.raises(TermNormalizationError) as excinfo:
        normalize_term(_raw_term(slug=slug))
    assert fragment in str(excinfo.value)
    assert slug in str(excinfo.value)


def test_normalize_term_reports_definition_length() -> None:
    with pytest.raises(TermNormalizationError, match=r"current: 10"):
        normalize_term(_raw_term(definition="too short!"))


def test_normalize_term_rejects_unknown_controversy_level() -> None:
    with pytest.raises(TermNormalizationError, match="'extreme' for 'foo-bar'"):
        normalize_term(_raw_term(controversy_level="extreme"))


def test_normalize_term_rejects_unknown_fields() -> None:
    with pytest.raises(TermNormalizationError, match="unexpected field"):
        normalize_term(_raw_term(author="someone"))


def test_normalize_term_requires_mapping() -> None:
    with pytest.raises(TermNormalizationError, match="must be an object"):
        normalize_term("foo-bar")
