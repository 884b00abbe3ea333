"""Randomized-trial Bayesian language detector.

The detector folds n-gram evidence into per-language probabilities over
many shuffled trials and averages the trial outcomes. Every call owns a
generator seeded from the sanitized input, so identical text against an
identical corpus table always ranks identically, and a single detector
can be shared across threads without locking.
"""

from __future__ import annotations

import hashlib
from typing import Sequence

import numpy as np

from core.config import DetectionSettings, validate_ngram_length
from core.constants import (
    ALPHA_DEFAULT,
    ALPHA_WIDTH,
    BASE_FREQUENCY,
    CHINESE_LANGUAGE_CODES,
    CONV_THRESHOLD,
    DEFAULT_MAX_TEXT_CHARS,
    DEFAULT_MIN_FEATURE_COUNT,
    HASH_ALGORITHM,
    ITERATION_LIMIT,
    JAPANESE_LANGUAGE_CODE,
    MAX_NGRAM_LENGTH,
    MIN_TRIALS,
    PROBABILITY_THRESHOLD,
    RENORMALIZE_INTERVAL,
    TRIAL_CONVERGENCE_THRESHOLD,
)
from core.errors import LexidetectConfigError
from core.logging_config import get_logger
from core.types import UNDETERMINED_RESULT, DetectionResult
from corpus.registry import CorpusTable
from text.ngram_extraction import extract_ngrams
from text.normalizer import normalize_text

_LOGGER = get_logger(__name__)


class LanguageDetector:
    """Ranks the languages of a corpus table for arbitrary text."""

    def __init__(
        self,
        table: CorpusTable,
        max_ngram_length: int = MAX_NGRAM_LENGTH,
        *,
        max_text_chars: int = DEFAULT_MAX_TEXT_CHARS,
        min_feature_count: int = DEFAULT_MIN_FEATURE_COUNT,
        iteration_limit: int = ITERATION_LIMIT,
        classify_chinese_as_japanese: bool = False,
        minimum_certainty: float = 0.0,
        fallback_iso_code: str | None = None,
    ) -> None:
        validate_ngram_length(max_ngram_length)
        if table.language_count == 0:
            raise LexidetectConfigError("A detector needs a corpus table with languages.")
        if max_text_chars <= 0:
            raise LexidetectConfigError(f"max_text_chars must be positive, got {max_text_chars}.")
        if min_feature_count < 1:
            raise LexidetectConfigError(
                f"min_feature_count must be at least 1, got {min_feature_count}."
            )
        if iteration_limit < 1:
            raise LexidetectConfigError(
                f"iteration_limit must be at least 1, got {iteration_limit}."
            )
        if minimum_certainty > 0.0 and not fallback_iso_code:
            raise LexidetectConfigError("minimum_certainty requires a fallback_iso_code.")
        self._table = table
        self._max_ngram_length = max_ngram_length
        self._max_text_chars = max_text_chars
        self._min_feature_count = min_feature_count
        self._iteration_limit = iteration_limit
        self._classify_chinese_as_japanese = classify_chinese_as_japanese
        self._minimum_certainty = minimum_certainty
        self._fallback_iso_code = fallback_iso_code
        _LOGGER.info(
            "detector_created",
            language_count=table.language_count,
            max_ngram_length=max_ngram_length,
        )

    @classmethod
    def from_settings(cls, table: CorpusTable, settings: DetectionSettings) -> "LanguageDetector":
        """Create a detector configured by detection settings."""
        return cls(
            table,
            settings.max_ngram_length,
            max_text_chars=settings.max_text_chars,
            classify_chinese_as_japanese=settings.classify_chinese_as_japanese,
            minimum_certainty=settings.minimum_certainty,
            fallback_iso_code=settings.fallback_iso_code,
        )

    @property
    def language_codes(self) -> tuple[str, ...]:
        return self._table.language_codes

    def detect(self, text: str) -> str:
        """Return the best ISO code for text, "und" when undetermined."""
        return self.detect_all(text)[0].iso_code

    def detect_all(self, text: str) -> list[DetectionResult]:
        """Rank candidate languages for text.

        Args:
            text: Raw input text of any length; only the first
                max_text_chars characters are considered.

        Returns:
            Non-empty list ordered by descending probability, ties broken
            by ISO code. A single "und" result signals insufficient
            evidence.
        """
        sanitized = normalize_text(text[: self._max_text_chars])
        candidates = (
            self._table.probabilities_for(ngram)
            for ngram in extract_ngrams(sanitized, self._max_ngram_length)
        )
        vectors = [vector for vector in candidates if vector is not None]
        if len(vectors) < self._min_feature_count:
            return [UNDETERMINED_RESULT]
        generator = np.random.default_rng(self._derive_seed(sanitized))
        averaged = self._average_trials(vectors, generator)
        return self._rank(averaged)

    def _derive_seed(self, sanitized: str) -> int:
        hasher = hashlib.new(HASH_ALGORITHM)
        hasher.update(sanitized.encode("utf-8"))
        hasher.update(f"|{self._max_ngram_length}|".encode("utf-8"))
        hasher.update(",".join(self._table.language_codes).encode("utf-8"))
        return int.from_bytes(hasher.digest()[:8], "big")

    def _average_trials(
        self,
        vectors: Sequence[np.ndarray],
        generator: np.random.Generator,
    ) -> np.ndarray:
        """Run trials until the leader's running mean stops moving."""
        averaged = np.zeros(self._table.language_count, dtype=np.float64)
        for trial_number in range(1, self._iteration_limit + 1):
            outcome = _run_trial(vectors, generator)
            previous = averaged.copy()
            averaged += (outcome - averaged) / trial_number
            leader = int(np.argmax(averaged))
            leader_shift = abs(averaged[leader] - previous[leader])
            if trial_number >= MIN_TRIALS and leader_shift < CONV_THRESHOLD:
                break
        return averaged

    def _rank(self, averaged: np.ndarray) -> list[DetectionResult]:
        scores = {
            code: float(probability)
            for code, probability in zip(self._table.language_codes, averaged)
        }
        if self._classify_chinese_as_japanese:
            scores = _merge_chinese_into_japanese(scores)
        ranked = sorted(
            (
                DetectionResult(iso_code=code, probability=probability)
                for code, probability in scores.items()
                if probability > PROBABILITY_THRESHOLD
            ),
            key=lambda result: (-result.probability, result.iso_code),
        )
        if not ranked:
            return [UNDETERMINED_RESULT]
        top = ranked[0]
        if self._fallback_iso_code and top.probability < self._minimum_certainty:
            return [DetectionResult(iso_code=self._fallback_iso_code, probability=top.probability)]
        return ranked


def _run_trial(vectors: Sequence[np.ndarray], generator: np.random.Generator) -> np.ndarray:
    """Fold shuffled features into a uniform prior and normalize.

    Unseen (language, n-gram) pairs contribute a jittered floor weight
    instead of zero so one rare miss cannot eliminate a language.
    """
    language_count = len(vectors[0])
    probabilities = np.full(language_count, 1.0 / language_count, dtype=np.float64)
    alpha = max(ALPHA_DEFAULT + generator.standard_normal() * ALPHA_WIDTH, ALPHA_WIDTH)
    floor = alpha / BASE_FREQUENCY
    for step, feature_index in enumerate(generator.permutation(len(vectors)), start=1):
        probabilities *= floor + vectors[feature_index]
        if step % RENORMALIZE_INTERVAL == 0:
            if _normalize_in_place(probabilities) > TRIAL_CONVERGENCE_THRESHOLD:
                break
    _normalize_in_place(probabilities)
    return probabilities


def _normalize_in_place(probabilities: np.ndarray) -> float:
    """Scale probabilities to sum to one and return the new maximum."""
    total = probabilities.sum()
    if total > 0.0:
        probabilities /= total
    else:
        probabilities.fill(1.0 / len(probabilities))
    return float(probabilities.max())


def _merge_chinese_into_japanese(scores: dict[str, float]) -> dict[str, float]:
    merged = {code: score for code, score in scores.items() if code not in CHINESE_LANGUAGE_CODES}
    chinese_total = sum(scores.get(code, 0.0) for code in CHINESE_LANGUAGE_CODES)
    merged[JAPANESE_LANGUAGE_CODE] = merged.get(JAPANESE_LANGUAGE_CODE, 0.0) + chinese_total
    return merged
