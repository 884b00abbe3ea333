"""Public SDK surface for Lexidetect.

This module provides a stable import path for library users.
It re-exports the detector, its settings, and the corpus primitives.
"""

from __future__ import annotations

from core.config import DetectionSettings
from core.errors import (
    LexidetectConfigError,
    LexidetectCorpusError,
    LexidetectError,
    LexidetectProfileError,
)
from core.settings_file import load_settings_file
from core.types import DetectionResult
from corpus.language_profile import LanguageProfile, LanguageProfileBuilder
from corpus.registry import (
    CorpusRegistry,
    CorpusTable,
    build_corpus_table,
    build_corpus_table_from_settings,
)
from detection.batch import detect_languages
from detection.detector import LanguageDetector
from text.normalizer import normalize_text


def build_detector(settings: DetectionSettings | None = None) -> LanguageDetector:
    """Load profiles and construct a ready-to-share detector.

    Args:
        settings: Detection settings; read from the environment when None.

    Returns:
        Immutable detector safe to share across threads.

    Raises:
        LexidetectConfigError: If settings name unknown codes or variants.
        LexidetectProfileError: If a profile file is malformed.
    """
    resolved = settings or DetectionSettings.from_env()
    table = build_corpus_table_from_settings(resolved)
    return LanguageDetector.from_settings(table, resolved)


__all__ = [
    "CorpusRegistry",
    "CorpusTable",
    "DetectionResult",
    "DetectionSettings",
    "LanguageDetector",
    "LanguageProfile",
    "LanguageProfileBuilder",
    "LexidetectConfigError",
    "LexidetectCorpusError",
    "LexidetectError",
    "LexidetectProfileError",
    "build_corpus_table",
    "build_detector",
    "detect_languages",
    "load_settings_file",
    "normalize_text",
]
