"""Batch language detection over many texts.

A published LanguageDetector holds no per-call state, so independent
texts can be classified concurrently from a thread pool without locks.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from core.types import DetectionResult
from detection.detector import LanguageDetector


def detect_languages(
    detector: LanguageDetector,
    texts: Iterable[str],
    max_workers: int | None = None,
) -> list[str]:
    """Detect the best language code for multiple texts.

    Args:
        detector: Fully constructed detector.
        texts: Iterable of text documents.
        max_workers: Thread count; None runs sequentially.

    Returns:
        List of language codes aligned to the input order.
    """
    return [results[0].iso_code for results in detect_all_languages(detector, texts, max_workers)]


def detect_all_languages(
    detector: LanguageDetector,
    texts: Iterable[str],
    max_workers: int | None = None,
) -> list[list[DetectionResult]]:
    """Rank candidate languages for multiple texts.

    Args:
        detector: Fully constructed detector.
        texts: Iterable of text documents.
        max_workers: Thread count; None runs sequentially.

    Returns:
        One ranked result list per text, in input order.
    """
    if max_workers is None:
        return [detector.detect_all(text) for text in texts]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(detector.detect_all, texts))
