"""N-gram feature extraction.

This module slides windows of length 1..max_length inside each token of
sanitized text. Windows never cross a space, and multi-character windows
that mix scripts are discarded as noise.
"""

from __future__ import annotations

from typing import Iterator

from core.config import validate_ngram_length
from core.constants import MAX_NGRAM_LENGTH
from text.unicode_scripts import is_single_script


def extract_ngrams(sanitized_text: str, max_length: int = MAX_NGRAM_LENGTH) -> list[str]:
    """Extract weighted n-gram features from sanitized text.

    Args:
        sanitized_text: Output of normalize_text.
        max_length: Longest n-gram length to produce.

    Returns:
        N-grams in token order, repeated once per occurrence.

    Raises:
        LexidetectConfigError: If max_length is outside the supported range.
    """
    validate_ngram_length(max_length)
    ngrams: list[str] = []
    for token in sanitized_text.split():
        ngrams.extend(_token_ngrams(token, max_length))
    return ngrams


def iter_sub_ngrams(word: str, max_length: int) -> Iterator[str]:
    """Yield every substring of word with length 1..max_length.

    Unlike extract_ngrams, no script filtering is applied; profile
    training counts exactly what it is fed.
    """
    for length in range(1, max_length + 1):
        for start in range(len(word) - length + 1):
            yield word[start : start + length]


def _token_ngrams(token: str, max_length: int) -> Iterator[str]:
    for ngram in iter_sub_ngrams(token, max_length):
        if len(ngram) == 1 or is_single_script(ngram):
            yield ngram
