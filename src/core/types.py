"""Shared typed models.

This module defines immutable data models used by the corpus,
detection, and evaluation layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from core.constants import UNDETERMINED_LANGUAGE_CODE

ProfileVariant = Literal["default", "short-text", "merged-average"]
SUPPORTED_PROFILE_VARIANTS: tuple[ProfileVariant, ...] = (
    "default",
    "short-text",
    "merged-average",
)


@dataclass(frozen=True)
class DetectionResult:
    """One ranked language candidate.

    Attributes:
        iso_code: ISO-639-1 code, or "und" when undetermined.
        probability: Averaged posterior probability in [0, 1].
    """

    iso_code: str
    probability: float

    @property
    def is_undetermined(self) -> bool:
        """Whether this result carries the reserved undetermined code."""
        return self.iso_code == UNDETERMINED_LANGUAGE_CODE


UNDETERMINED_RESULT = DetectionResult(iso_code=UNDETERMINED_LANGUAGE_CODE, probability=0.0)
