"""Corpus registry and indexed probability table.

The registry turns a list of language profiles into one CorpusTable that
maps every known n-gram to a vector of smoothed per-language
probabilities. Index i of every vector belongs to language_codes[i].
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Sequence

import numpy as np

from core.config import DetectionSettings
from core.constants import SMOOTHING_ALPHA, SMOOTHING_VOCABULARY_SIZE
from core.errors import LexidetectCorpusError, LexidetectProfileError
from core.logging_config import get_logger
from core.types import ProfileVariant
from corpus.language_profile import LanguageProfile
from corpus.profile_store import ProfileStore

_LOGGER = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class CorpusTable:
    """Read-only n-gram probability table over an ordered language list.

    Attributes:
        language_codes: Language codes in index order.
        ngram_probabilities: N-gram to float64 vector with one slot per
            language; a slot a profile never filled holds 0.0.
    """

    language_codes: tuple[str, ...]
    ngram_probabilities: Mapping[str, np.ndarray]

    def __post_init__(self) -> None:
        language_count = len(self.language_codes)
        frozen: dict[str, np.ndarray] = {}
        for ngram, vector in self.ngram_probabilities.items():
            array = np.array(vector, dtype=np.float64)
            if array.shape != (language_count,):
                raise LexidetectCorpusError(
                    f"Probability vector for {ngram!r} has shape {array.shape}, "
                    f"expected ({language_count},)."
                )
            array.flags.writeable = False
            frozen[ngram] = array
        object.__setattr__(self, "language_codes", tuple(self.language_codes))
        object.__setattr__(self, "ngram_probabilities", MappingProxyType(frozen))

    @property
    def language_count(self) -> int:
        return len(self.language_codes)

    def __contains__(self, ngram: object) -> bool:
        return ngram in self.ngram_probabilities

    def probabilities_for(self, ngram: str) -> np.ndarray | None:
        """Return the per-language vector for ngram, or None if unseen."""
        return self.ngram_probabilities.get(ngram)

    def index_of(self, iso_code: str) -> int:
        """Return the slot index of a language code.

        Raises:
            LexidetectCorpusError: If the code is not part of the table.
        """
        try:
            return self.language_codes.index(iso_code)
        except ValueError as error:
            raise LexidetectCorpusError(
                f"Language '{iso_code}' is not part of this corpus table."
            ) from error


def smoothed_probability(count: int, total: int) -> float:
    """Additively smoothed relative frequency of one n-gram.

    The same alpha and vocabulary size apply to every language so no
    profile gains an advantage from the smoothing itself.
    """
    return (count + SMOOTHING_ALPHA) / (total + SMOOTHING_ALPHA * SMOOTHING_VOCABULARY_SIZE)


class CorpusRegistry:
    """Assembles profiles into a CorpusTable, one slot per language."""

    def __init__(self, total_languages: int) -> None:
        if total_languages <= 0:
            raise LexidetectCorpusError(
                f"A corpus needs at least one language, got total_languages={total_languages}."
            )
        self._total_languages = total_languages
        self._codes: list[str | None] = [None] * total_languages
        self._probabilities: dict[str, np.ndarray] = {}

    def add_profile(self, profile: LanguageProfile, index: int, total_languages: int) -> None:
        """Insert a profile's smoothed probabilities into slot index.

        Args:
            profile: Language profile to register.
            index: Slot to fill, 0-based.
            total_languages: Table width; must match the registry.

        Raises:
            LexidetectCorpusError: If index is out of range or already used,
                or the profile name is already registered.
        """
        if total_languages != self._total_languages:
            raise LexidetectCorpusError(
                f"Registry was sized for {self._total_languages} languages, "
                f"got total_languages={total_languages}."
            )
        if not 0 <= index < total_languages:
            raise LexidetectCorpusError(
                f"Profile index {index} is out of range for {total_languages} languages."
            )
        if self._codes[index] is not None:
            raise LexidetectCorpusError(
                f"Profile index {index} is already used by '{self._codes[index]}'."
            )
        if profile.name in self._codes:
            raise LexidetectCorpusError(f"Profile '{profile.name}' is already registered.")
        self._codes[index] = profile.name
        for ngram, count in profile.iter_ngram_counts():
            vector = self._probabilities.get(ngram)
            if vector is None:
                vector = np.zeros(total_languages, dtype=np.float64)
                self._probabilities[ngram] = vector
            vector[index] = smoothed_probability(count, profile.total_for_length(len(ngram)))

    def build_table(self) -> CorpusTable:
        """Freeze the registered profiles into a CorpusTable.

        Raises:
            LexidetectCorpusError: If any slot has no profile.
        """
        missing = [index for index, code in enumerate(self._codes) if code is None]
        if missing:
            raise LexidetectCorpusError(
                f"Corpus slots {missing} have no profile; "
                f"register all {self._total_languages} languages before building."
            )
        codes = tuple(code for code in self._codes if code is not None)
        table = CorpusTable(language_codes=codes, ngram_probabilities=self._probabilities)
        _LOGGER.info(
            "corpus_table_built",
            language_count=len(codes),
            ngram_count=len(table.ngram_probabilities),
        )
        return table


def build_corpus_table(
    iso_codes: Sequence[str],
    profile_variant: ProfileVariant,
    profile_root: Path,
) -> CorpusTable:
    """Load a profile set and build its table for the selected languages.

    Args:
        iso_codes: Languages in index order; empty selects every profile
            available for the variant, sorted by code.
        profile_variant: Which profile set to load.
        profile_root: Directory holding the profile sets.

    Returns:
        Fully built corpus table.

    Raises:
        LexidetectConfigError: If the variant or a code is unknown.
        LexidetectProfileError: If a profile file is malformed.
    """
    store = ProfileStore(profile_root)
    selected = tuple(iso_codes) or store.available_codes(profile_variant)
    if not selected:
        raise LexidetectCorpusError(
            f"Profile set '{profile_variant}' at {store.profile_root} contains no profiles."
        )
    registry = CorpusRegistry(len(selected))
    for index, iso_code in enumerate(selected):
        profile = store.load(iso_code, profile_variant)
        if profile.name != iso_code:
            raise LexidetectProfileError(
                f"Profile file for '{iso_code}' declares name '{profile.name}'. "
                "Rename the file or fix the profile name."
            )
        registry.add_profile(profile, index, len(selected))
    return registry.build_table()


def build_corpus_table_from_settings(settings: DetectionSettings) -> CorpusTable:
    """Build the corpus table described by detection settings."""
    return build_corpus_table(settings.iso_codes, settings.profile, settings.profile_root)
