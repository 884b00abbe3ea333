"""Unit tests for language profiles and their serialization."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import LexidetectProfileError
from corpus.language_profile import (
    LanguageProfile,
    LanguageProfileBuilder,
    dump_profile,
    load_profile,
)


def _build_profile(name: str, words: str) -> LanguageProfile:
    builder = LanguageProfileBuilder(name)
    for word in words.split(" "):
        builder.add(word)
    return builder.build()


def test_add_counts_every_sub_ngram() -> None:
    """A word should contribute all windows of length 1..3."""
    profile = _build_profile("xx", "abc")

    assert dict(profile.ngram_counts) == {"a": 1, "b": 1, "c": 1, "ab": 1, "bc": 1, "abc": 1}
    assert profile.totals_by_length == (3, 2, 1)


def test_add_accumulates_repeated_words() -> None:
    """Repeated tokens should increase counts and totals."""
    profile = _build_profile("en_test", "a a a b b c c d e")

    assert profile.ngram_counts["a"] == 3
    assert profile.totals_by_length == (9, 0, 0)


def test_add_respects_builder_max_length() -> None:
    """A builder limited to bigrams should not count trigrams."""
    builder = LanguageProfileBuilder("xx", max_ngram_length=2)
    builder.add("abc")

    profile = builder.build()

    assert "abc" not in profile.ngram_counts
    assert profile.totals_by_length == (3, 2, 0)


def test_add_ignores_empty_word() -> None:
    """Empty tokens carry no evidence."""
    builder = LanguageProfileBuilder("xx")
    builder.add("")

    assert builder.build().totals_by_length == (0, 0, 0)


def test_add_rejects_whitespace() -> None:
    """Multi-token input must be split by the caller."""
    builder = LanguageProfileBuilder("xx")

    with pytest.raises(LexidetectProfileError):
        builder.add("a b")


def test_built_profile_is_read_only() -> None:
    """Loaded profiles must not be mutated during classification."""
    profile = _build_profile("xx", "ab")

    with pytest.raises(TypeError):
        profile.ngram_counts["zz"] = 1  # type: ignore[index]


def test_builder_from_profile_keeps_existing_counts() -> None:
    """Resuming a snapshot should add on top of its counts."""
    builder = LanguageProfileBuilder.from_profile(_build_profile("xx", "ab"))
    builder.add("a")

    profile = builder.build()

    assert profile.ngram_counts["a"] == 2
    assert profile.totals_by_length == (3, 1, 0)


def test_serialized_round_trip_preserves_counts_and_totals() -> None:
    """from_serialized(to_serialized(p)) should equal p."""
    profile = _build_profile("fr_test", "a b b c c c d d d lait")

    restored = LanguageProfile.from_serialized(profile.to_serialized())

    assert restored.name == profile.name
    assert dict(restored.ngram_counts) == dict(profile.ngram_counts)
    assert restored.totals_by_length == profile.totals_by_length


def test_from_serialized_accepts_integral_floats() -> None:
    """Totals written as 0.0 by other tooling should load as integers."""
    profile = LanguageProfile.from_serialized(
        {"freq": {"a": 2.0}, "n_words": [2.0, 0.0, 0.0], "name": "en_test"}
    )

    assert profile.ngram_counts["a"] == 2
    assert profile.totals_by_length == (2, 0, 0)


@pytest.mark.parametrize(
    "payload",
    [
        {"freq": {}, "n_words": [0, 0, 0]},
        {"name": "", "freq": {}, "n_words": [0, 0, 0]},
        {"name": "xx", "n_words": [0, 0, 0]},
        {"name": "xx", "freq": {}, "n_words": [0, 0]},
        {"name": "xx", "freq": {"a": -1}, "n_words": [0, 0, 0]},
        {"name": "xx", "freq": {"a": 1.5}, "n_words": [1, 0, 0]},
        {"name": "xx", "freq": {"a": True}, "n_words": [1, 0, 0]},
        {"name": "xx", "freq": {"abcd": 1}, "n_words": [0, 0, 0]},
        {"name": "xx", "freq": {}, "n_words": [0, float("nan"), 0]},
    ],
)
def test_from_serialized_rejects_malformed_payload(payload: dict[str, object]) -> None:
    """Malformed profiles are configuration errors."""
    with pytest.raises(LexidetectProfileError):
        LanguageProfile.from_serialized(payload)


def test_dump_and_load_profile_round_trip(tmp_path: Path) -> None:
    """A dumped profile should load back unchanged."""
    profile = _build_profile("ja_test", "あ あ あ い う え え")
    profile_path = tmp_path / "profiles" / "ja_test.json"

    dump_profile(profile, profile_path)
    restored = load_profile(profile_path)

    assert dict(restored.ngram_counts) == dict(profile.ngram_counts)
    assert restored.totals_by_length == (7, 0, 0)


def test_load_profile_rejects_invalid_json(tmp_path: Path) -> None:
    """Corrupt profile files should fail loudly."""
    profile_path = tmp_path / "broken.json"
    profile_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(LexidetectProfileError):
        load_profile(profile_path)


def test_load_profile_rejects_missing_file(tmp_path: Path) -> None:
    """Missing profile files should fail loudly."""
    with pytest.raises(LexidetectProfileError):
        load_profile(tmp_path / "missing.json")
