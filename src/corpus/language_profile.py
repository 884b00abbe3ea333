"""Trained n-gram frequency profiles.

A profile is built once through LanguageProfileBuilder.add(word) or loaded
from its JSON snapshot, and is immutable afterwards. The JSON schema is:

    {"name": "<id>", "freq": {"<ngram>": <count>}, "n_words": [c1, c2, c3]}

where n_words holds the total count of n-grams of each length.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import math
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

from core.config import validate_ngram_length
from core.constants import MAX_NGRAM_LENGTH
from core.errors import LexidetectProfileError
from text.ngram_extraction import iter_sub_ngrams


@dataclass(frozen=True)
class LanguageProfile:
    """Immutable n-gram frequency table for one language.

    Attributes:
        name: Language or variant identifier, usually an ISO code.
        ngram_counts: Read-only mapping of n-gram to occurrence count.
        totals_by_length: Total n-gram occurrences per length, index 0
            holding length-1 totals.
    """

    name: str
    ngram_counts: Mapping[str, int]
    totals_by_length: tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "ngram_counts", MappingProxyType(dict(self.ngram_counts)))
        object.__setattr__(self, "totals_by_length", tuple(self.totals_by_length))

    @classmethod
    def from_serialized(cls, payload: Mapping[str, object]) -> "LanguageProfile":
        """Build a profile from its serialized mapping.

        Args:
            payload: Decoded JSON object with name, freq, and n_words.

        Returns:
            Validated immutable profile.

        Raises:
            LexidetectProfileError: If any field is missing or malformed.
        """
        if not isinstance(payload, Mapping):
            raise LexidetectProfileError(
                f"Profile payload must be an object, got {type(payload).__name__}."
            )
        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            raise LexidetectProfileError("Profile field 'name' must be a non-empty string.")
        counts = _parse_freq(payload.get("freq"), name)
        totals = _parse_n_words(payload.get("n_words"), name)
        return cls(name=name, ngram_counts=counts, totals_by_length=totals)

    def to_serialized(self) -> dict[str, object]:
        """Return the JSON-ready mapping for this profile."""
        return {
            "name": self.name,
            "freq": dict(self.ngram_counts),
            "n_words": list(self.totals_by_length),
        }

    def iter_ngram_counts(self) -> Iterator[tuple[str, int]]:
        """Iterate (ngram, count) pairs without exposing mutable state."""
        return iter(self.ngram_counts.items())

    def total_for_length(self, length: int) -> int:
        """Return the n-gram total for one length, 0 when out of range."""
        if 1 <= length <= len(self.totals_by_length):
            return self.totals_by_length[length - 1]
        return 0


class LanguageProfileBuilder:
    """Mutable construction phase for a LanguageProfile."""

    def __init__(self, name: str, max_ngram_length: int = MAX_NGRAM_LENGTH) -> None:
        if not name.strip():
            raise LexidetectProfileError("Profile name must be a non-empty string.")
        validate_ngram_length(max_ngram_length)
        self._name = name
        self._max_ngram_length = max_ngram_length
        self._counts: dict[str, int] = {}
        self._totals = [0] * MAX_NGRAM_LENGTH

    @classmethod
    def from_profile(
        cls,
        profile: LanguageProfile,
        max_ngram_length: int = MAX_NGRAM_LENGTH,
    ) -> "LanguageProfileBuilder":
        """Resume building on top of an existing profile snapshot."""
        builder = cls(profile.name, max_ngram_length)
        builder._counts.update(profile.ngram_counts)
        for index, total in enumerate(profile.totals_by_length[:MAX_NGRAM_LENGTH]):
            builder._totals[index] = total
        return builder

    def add(self, word: str) -> None:
        """Count every sub-n-gram of one whitespace-free token.

        Args:
            word: Training token; empty tokens are ignored.

        Raises:
            LexidetectProfileError: If word contains whitespace.
        """
        if not word:
            return
        if any(character.isspace() for character in word):
            raise LexidetectProfileError(
                f"Profile '{self._name}' accepts single tokens only, got {word!r}. "
                "Split text on whitespace before calling add()."
            )
        for ngram in iter_sub_ngrams(word, self._max_ngram_length):
            self._counts[ngram] = self._counts.get(ngram, 0) + 1
            self._totals[len(ngram) - 1] += 1

    def build(self) -> LanguageProfile:
        """Freeze the accumulated counts into an immutable profile."""
        return LanguageProfile(
            name=self._name,
            ngram_counts=self._counts,
            totals_by_length=tuple(self._totals),
        )


def load_profile(profile_path: Path) -> LanguageProfile:
    """Read and validate one JSON profile file.

    Args:
        profile_path: Path to a profile JSON file.

    Returns:
        Immutable profile.

    Raises:
        LexidetectProfileError: If the file is unreadable or malformed.
    """
    try:
        payload = json.loads(profile_path.read_text(encoding="utf-8"))
    except OSError as error:
        raise LexidetectProfileError(
            f"Failed to read profile at {profile_path}: {error}. "
            "Check the profile root and file permissions."
        ) from error
    except json.JSONDecodeError as error:
        raise LexidetectProfileError(
            f"Profile at {profile_path} is not valid JSON: {error}."
        ) from error
    return LanguageProfile.from_serialized(payload)


def dump_profile(profile: LanguageProfile, profile_path: Path) -> None:
    """Write a profile as JSON, creating parent directories."""
    profile_path.parent.mkdir(parents=True, exist_ok=True)
    profile_path.write_text(
        json.dumps(profile.to_serialized(), ensure_ascii=False, sort_keys=True),
        encoding="utf-8",
    )


def _parse_freq(raw_freq: object, name: str) -> dict[str, int]:
    if not isinstance(raw_freq, Mapping):
        raise LexidetectProfileError(f"Profile '{name}' field 'freq' must be an object.")
    counts: dict[str, int] = {}
    for ngram, raw_count in raw_freq.items():
        if not isinstance(ngram, str) or not 1 <= len(ngram) <= MAX_NGRAM_LENGTH:
            raise LexidetectProfileError(
                f"Profile '{name}' has invalid n-gram key {ngram!r}; "
                f"keys must be 1 to {MAX_NGRAM_LENGTH} characters."
            )
        counts[ngram] = _as_count(raw_count, f"Profile '{name}' count for {ngram!r}")
    return counts


def _parse_n_words(raw_totals: object, name: str) -> tuple[int, ...]:
    if not isinstance(raw_totals, (list, tuple)) or len(raw_totals) != MAX_NGRAM_LENGTH:
        raise LexidetectProfileError(
            f"Profile '{name}' field 'n_words' must list {MAX_NGRAM_LENGTH} totals."
        )
    return tuple(_as_count(total, f"Profile '{name}' n_words entry") for total in raw_totals)


def _as_count(raw_value: object, context: str) -> int:
    """Accept non-negative integers, including integral floats like 3.0."""
    if isinstance(raw_value, bool) or not isinstance(raw_value, (int, float)):
        raise LexidetectProfileError(f"{context} must be a number, got {raw_value!r}.")
    if not math.isfinite(raw_value) or raw_value < 0 or int(raw_value) != raw_value:
        raise LexidetectProfileError(
            f"{context} must be a non-negative integer, got {raw_value!r}."
        )
    return int(raw_value)
