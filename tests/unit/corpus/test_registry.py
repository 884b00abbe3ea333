"""Unit tests for the corpus registry and probability table."""

from __future__ import annotations

import json
from pathlib import Path
import shutil

import pytest

from core.constants import SMOOTHING_ALPHA, SMOOTHING_VOCABULARY_SIZE
from core.errors import LexidetectConfigError, LexidetectCorpusError, LexidetectProfileError
from corpus.language_profile import LanguageProfile, LanguageProfileBuilder
from corpus.registry import CorpusRegistry, build_corpus_table, smoothed_probability
from tests.fixture_paths import fixture_path


def _build_profile(name: str, words: str) -> LanguageProfile:
    builder = LanguageProfileBuilder(name)
    for word in words.split(" "):
        builder.add(word)
    return builder.build()


def test_smoothed_probability_uses_shared_constants() -> None:
    """Smoothing should follow (count + a) / (total + a * V)."""
    expected = (3 + SMOOTHING_ALPHA) / (9 + SMOOTHING_ALPHA * SMOOTHING_VOCABULARY_SIZE)

    assert smoothed_probability(3, 9) == pytest.approx(expected)


def test_add_profile_fills_slot_and_leaves_others_zero() -> None:
    """An n-gram unknown to a language should hold probability 0 there."""
    registry = CorpusRegistry(2)
    registry.add_profile(_build_profile("en_test", "a a e"), 0, 2)
    registry.add_profile(_build_profile("fr_test", "a"), 1, 2)

    table = registry.build_table()

    assert table.language_codes == ("en_test", "fr_test")
    assert table.ngram_probabilities["e"][1] == 0.0
    assert table.ngram_probabilities["a"][0] == pytest.approx(smoothed_probability(2, 3))
    assert table.ngram_probabilities["a"][1] == pytest.approx(smoothed_probability(1, 1))


def test_add_profile_rejects_out_of_range_index() -> None:
    """Index must be below total_languages."""
    registry = CorpusRegistry(2)

    with pytest.raises(LexidetectCorpusError):
        registry.add_profile(_build_profile("xx", "a"), 2, 2)


def test_add_profile_rejects_reused_index() -> None:
    """A slot can only be filled once."""
    registry = CorpusRegistry(2)
    registry.add_profile(_build_profile("xx", "a"), 0, 2)

    with pytest.raises(LexidetectCorpusError):
        registry.add_profile(_build_profile("yy", "a"), 0, 2)


def test_add_profile_rejects_mismatched_table_width() -> None:
    """total_languages must agree with the registry size."""
    registry = CorpusRegistry(2)

    with pytest.raises(LexidetectCorpusError):
        registry.add_profile(_build_profile("xx", "a"), 0, 3)


def test_add_profile_rejects_duplicate_language() -> None:
    """Two slots cannot carry the same language code."""
    registry = CorpusRegistry(2)
    registry.add_profile(_build_profile("xx", "a"), 0, 2)

    with pytest.raises(LexidetectCorpusError):
        registry.add_profile(_build_profile("xx", "b"), 1, 2)


def test_build_table_rejects_unfilled_slots() -> None:
    """A partially built table must never be produced."""
    registry = CorpusRegistry(3)
    registry.add_profile(_build_profile("xx", "a"), 0, 3)

    with pytest.raises(LexidetectCorpusError):
        registry.build_table()


def test_table_vectors_are_read_only() -> None:
    """Published probability vectors must not be writable."""
    registry = CorpusRegistry(1)
    registry.add_profile(_build_profile("xx", "a"), 0, 1)
    table = registry.build_table()

    with pytest.raises(ValueError):
        table.ngram_probabilities["a"][0] = 1.0


def test_build_corpus_table_assigns_requested_order() -> None:
    """Index should equal the position in the requested code list."""
    table = build_corpus_table(("ja", "en"), "default", fixture_path("profiles"))

    assert table.language_codes == ("ja", "en")
    assert table.index_of("en") == 1
    assert "東京" in table


def test_build_corpus_table_uses_all_profiles_when_unrestricted() -> None:
    """Empty code list should select every profile, sorted by code."""
    table = build_corpus_table((), "default", fixture_path("profiles"))

    assert table.language_codes == ("de", "en", "ja")


def test_build_corpus_table_rejects_unknown_code() -> None:
    """Unknown codes fail at build time, not at classification time."""
    with pytest.raises(LexidetectConfigError):
        build_corpus_table(("en", "xx"), "default", fixture_path("profiles"))


def test_build_corpus_table_rejects_missing_variant() -> None:
    """A variant without a profile directory is a configuration error."""
    with pytest.raises(LexidetectConfigError):
        build_corpus_table(("en",), "merged-average", fixture_path("profiles"))


def test_build_corpus_table_loads_selected_variant() -> None:
    """The short-text variant should load from its own directory."""
    table = build_corpus_table((), "short-text", fixture_path("profiles"))

    assert table.language_codes == ("en",)


def test_build_corpus_table_rejects_corrupt_profile(tmp_path: Path) -> None:
    """Corrupt resources abort the whole build."""
    variant_dir = tmp_path / "default"
    shutil.copytree(fixture_path("profiles/default"), variant_dir)
    (variant_dir / "de.json").write_text("[]", encoding="utf-8")

    with pytest.raises(LexidetectProfileError):
        build_corpus_table(("en", "de"), "default", tmp_path)


def test_build_corpus_table_rejects_mismatched_profile_name(tmp_path: Path) -> None:
    """A file must declare the code it is stored under."""
    variant_dir = tmp_path / "default"
    variant_dir.mkdir()
    payload = {"name": "fr", "freq": {"a": 1}, "n_words": [1, 0, 0]}
    (variant_dir / "de.json").write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(LexidetectProfileError):
        build_corpus_table(("de",), "default", tmp_path)


@pytest.mark.parametrize("variant", ["bogus", "", "."])
def test_build_corpus_table_rejects_unsupported_variant(tmp_path: Path, variant: str) -> None:
    """Only the closed variant set is accepted, even if a directory matches."""
    payload = {"name": "en", "freq": {"a": 1}, "n_words": [1, 0, 0]}
    (tmp_path / "bogus").mkdir()
    for directory in (tmp_path, tmp_path / "bogus"):
        (directory / "en.json").write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(LexidetectConfigError, match="Unsupported profile variant"):
        build_corpus_table(("en",), variant, tmp_path)
    with pytest.raises(LexidetectConfigError, match="Unsupported profile variant"):
        build_corpus_table((), variant, tmp_path)
