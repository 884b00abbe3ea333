"""Accuracy regression harness.

Labeled texts are cut into random fixed-length substrings, each substring
is classified, and the share of correct answers per language is compared
against recorded baselines. Sampling is seeded from its own arguments so a
rerun draws exactly the same substrings.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
import hashlib
import math
from pathlib import Path
from typing import Mapping

import numpy as np

from core.constants import DEFAULT_ACCURACY_TOLERANCE, HASH_ALGORITHM
from core.errors import LexidetectEvaluationError
from core.logging_config import get_logger
from detection.detector import LanguageDetector

_LOGGER = get_logger(__name__)
_BASELINE_FIXED_COLUMNS = ("dataset", "profile", "substring_length", "sample_size")


@dataclass(frozen=True)
class AccuracyBaseline:
    """Expected accuracies for one dataset/profile/sampling combination.

    Attributes:
        dataset: Labeled dataset name.
        profile: Profile variant the baseline was recorded with.
        substring_length: Characters per sampled substring, 0 for whole texts.
        sample_size: Substrings drawn per text.
        expected: Language code to expected accuracy; NaN disables a language.
    """

    dataset: str
    profile: str
    substring_length: int
    sample_size: int
    expected: Mapping[str, float] = field(default_factory=dict)


def read_labeled_dataset(dataset_path: Path) -> dict[str, list[str]]:
    """Read a tab-separated "code<TAB>text" dataset.

    Args:
        dataset_path: TSV file path.

    Returns:
        Language code to texts, in file order.

    Raises:
        LexidetectEvaluationError: If a line lacks the tab separator.
    """
    language_to_texts: dict[str, list[str]] = {}
    lines = dataset_path.read_text(encoding="utf-8").splitlines()
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        language, separator, text = line.partition("\t")
        if not separator or not language:
            raise LexidetectEvaluationError(
                f"Dataset {dataset_path} line {line_number} is not 'code<TAB>text'."
            )
        language_to_texts.setdefault(language, []).append(text)
    return language_to_texts


def read_accuracy_baselines(baseline_path: Path) -> list[AccuracyBaseline]:
    """Read recorded baselines from a CSV file.

    The header starts with dataset, profile, substring_length and
    sample_size; every further column is a language code.
    """
    with baseline_path.open(encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        fieldnames = tuple(reader.fieldnames or ())
        if fieldnames[: len(_BASELINE_FIXED_COLUMNS)] != _BASELINE_FIXED_COLUMNS:
            raise LexidetectEvaluationError(
                f"Baseline file {baseline_path} must start with columns "
                f"{', '.join(_BASELINE_FIXED_COLUMNS)}."
            )
        languages = fieldnames[len(_BASELINE_FIXED_COLUMNS) :]
        return [
            AccuracyBaseline(
                dataset=row["dataset"],
                profile=row["profile"],
                substring_length=int(row["substring_length"]),
                sample_size=int(row["sample_size"]),
                expected={language: float(row[language]) for language in languages},
            )
            for row in reader
        ]


def sample_substrings(text: str, substring_length: int, sample_size: int) -> list[str]:
    """Draw substrings uniformly with replacement, skipping blank ones.

    Args:
        text: Source text.
        substring_length: Characters per substring; 0 with sample_size 1
            returns the whole text. Texts shorter than the requested
            length yield substrings of the text's own length.
        sample_size: Number of substrings to return.

    Returns:
        Sampled substrings, identical for identical arguments.

    Raises:
        LexidetectEvaluationError: If the text is blank or sizes are invalid.
    """
    if substring_length == 0 and sample_size == 1:
        return [text]
    if substring_length <= 0 or sample_size <= 0:
        raise LexidetectEvaluationError(
            f"Invalid sampling request: substring_length={substring_length}, "
            f"sample_size={sample_size}."
        )
    trimmed = text.strip()
    if not trimmed:
        raise LexidetectEvaluationError("Cannot sample substrings from blank text.")
    length = min(len(trimmed), substring_length)
    generator = np.random.default_rng(_sampling_seed(trimmed, length, sample_size))
    samples: list[str] = []
    while len(samples) < sample_size:
        start = int(generator.integers(0, len(trimmed) - length + 1))
        substring = trimmed[start : start + length]
        if substring.strip():
            samples.append(substring)
    return samples


def measure_accuracy(
    detector: LanguageDetector,
    dataset: Mapping[str, list[str]],
    substring_length: int,
    sample_size: int,
) -> dict[str, float]:
    """Measure per-language accuracy of detector on sampled substrings.

    Only dataset languages the detector was configured with are measured.

    Returns:
        Language code to fraction of substrings classified correctly.
    """
    configured = set(detector.language_codes)
    accuracies: dict[str, float] = {}
    undetermined_count = 0
    for language in sorted(set(dataset) & configured):
        texts = dataset[language]
        if not texts:
            continue
        correct = 0
        for text in texts:
            for substring in sample_substrings(text, substring_length, sample_size):
                top = detector.detect_all(substring)[0]
                if top.is_undetermined:
                    undetermined_count += 1
                elif top.iso_code == language:
                    correct += 1
        accuracies[language] = correct / (len(texts) * sample_size)
    _LOGGER.info(
        "accuracy_measured",
        language_count=len(accuracies),
        substring_length=substring_length,
        sample_size=sample_size,
        undetermined_count=undetermined_count,
    )
    return accuracies


def check_accuracy_baseline(
    measured: Mapping[str, float],
    expected: Mapping[str, float],
    tolerance: float = DEFAULT_ACCURACY_TOLERANCE,
) -> None:
    """Fail when measured accuracy drifts from the recorded baseline.

    Args:
        measured: Output of measure_accuracy.
        expected: Recorded accuracies; NaN entries are not evaluated.
        tolerance: Maximum absolute deviation per language.

    Raises:
        LexidetectEvaluationError: Listing every missing or drifted language.
    """
    failures: list[str] = []
    for language, expected_accuracy in sorted(expected.items()):
        if math.isnan(expected_accuracy):
            continue
        if language not in measured:
            failures.append(f"{language}: not measured")
            continue
        deviation = abs(measured[language] - expected_accuracy)
        if deviation > tolerance:
            failures.append(
                f"{language}: expected {expected_accuracy:.6f}, got {measured[language]:.6f}"
            )
    if failures:
        raise LexidetectEvaluationError(
            "Accuracy drifted from baseline: " + "; ".join(failures) + "."
        )


def _sampling_seed(text: str, length: int, sample_size: int) -> int:
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(f"{length}|{sample_size}|{text}".encode("utf-8"))
    return int.from_bytes(hasher.digest()[:8], "big")
