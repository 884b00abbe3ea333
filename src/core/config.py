"""Runtime configuration model for Lexidetect.

This module owns all settings parsing and validation.
Other modules consume a typed settings object instead of raw strings.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import cast

from core.constants import (
    DEFAULT_MAX_TEXT_CHARS,
    DEFAULT_PROFILE_ROOT,
    ISO_CODE_SEPARATOR,
    MAX_NGRAM_LENGTH,
    MIN_NGRAM_LENGTH,
)
from core.errors import LexidetectConfigError
from core.types import SUPPORTED_PROFILE_VARIANTS, ProfileVariant


@dataclass(frozen=True)
class DetectionSettings:
    """Validated detection configuration.

    Attributes:
        iso_codes: Requested language codes in index order. Empty means
            every profile available for the variant.
        profile: Profile variant used to select the bundled profile set.
        profile_root: Directory holding one subdirectory per variant.
        max_text_chars: Input prefix length considered by the detector.
        max_ngram_length: Longest n-gram extracted from input text.
        classify_chinese_as_japanese: Report Chinese results as "ja".
        minimum_certainty: Top-result probability below which the
            fallback code is reported instead.
        fallback_iso_code: Code reported when certainty is too low.
    """

    iso_codes: tuple[str, ...] = ()
    profile: ProfileVariant = "default"
    profile_root: Path = DEFAULT_PROFILE_ROOT
    max_text_chars: int = DEFAULT_MAX_TEXT_CHARS
    max_ngram_length: int = MAX_NGRAM_LENGTH
    classify_chinese_as_japanese: bool = False
    minimum_certainty: float = 0.0
    fallback_iso_code: str | None = None

    def __post_init__(self) -> None:
        _validate_iso_codes(self.iso_codes)
        if not isinstance(self.profile_root, (str, os.PathLike)):
            raise LexidetectConfigError(
                f"profile_root must be a path, got {type(self.profile_root).__name__}."
            )
        object.__setattr__(self, "profile_root", Path(self.profile_root))
        if self.profile not in SUPPORTED_PROFILE_VARIANTS:
            raise LexidetectConfigError(
                f"Unsupported profile variant '{self.profile}'. "
                f"Choose one of: {', '.join(SUPPORTED_PROFILE_VARIANTS)}."
            )
        if self.max_text_chars <= 0:
            raise LexidetectConfigError(
                f"max_text_chars must be positive, got {self.max_text_chars}."
            )
        validate_ngram_length(self.max_ngram_length)
        if not 0.0 <= self.minimum_certainty <= 1.0:
            raise LexidetectConfigError(
                f"minimum_certainty must be within [0, 1], got {self.minimum_certainty}."
            )
        if self.minimum_certainty > 0.0 and not self.fallback_iso_code:
            raise LexidetectConfigError(
                "minimum_certainty requires a fallback_iso_code. "
                "Set fallback_iso_code to the language reported on low certainty."
            )

    @classmethod
    def from_iso_codes(
        cls,
        iso_codes: str,
        profile: str = "",
        **overrides: object,
    ) -> "DetectionSettings":
        """Build settings from a comma-separated code list.

        Args:
            iso_codes: Codes such as "en,de,ja"; empty selects all profiles.
            profile: Profile variant name; empty selects the default set.
            **overrides: Remaining DetectionSettings fields.

        Returns:
            A validated settings object.

        Raises:
            LexidetectConfigError: If codes or variant are invalid.
        """
        return cls(
            iso_codes=parse_iso_codes(iso_codes),
            profile=parse_profile_variant(profile),
            **overrides,  # type: ignore[arg-type]
        )

    @classmethod
    def from_env(cls) -> "DetectionSettings":
        """Build settings from process environment variables.

        Returns:
            A validated settings object.

        Raises:
            LexidetectConfigError: If environment values are invalid.
        """
        iso_codes = os.getenv("LEXIDETECT_ISO_CODES", "")
        profile = os.getenv("LEXIDETECT_PROFILE", "")
        profile_root = os.getenv("LEXIDETECT_PROFILE_ROOT", str(DEFAULT_PROFILE_ROOT))
        max_text_chars = _parse_int_env(
            "LEXIDETECT_MAX_TEXT_CHARS",
            os.getenv("LEXIDETECT_MAX_TEXT_CHARS", str(DEFAULT_MAX_TEXT_CHARS)),
        )
        return cls(
            iso_codes=parse_iso_codes(iso_codes),
            profile=parse_profile_variant(profile),
            profile_root=Path(profile_root).expanduser().resolve(),
            max_text_chars=max_text_chars,
        )


def parse_iso_codes(raw_value: str) -> tuple[str, ...]:
    """Split a comma-separated ISO code list.

    Args:
        raw_value: Raw code list, for example "en,de".

    Returns:
        Ordered codes; empty when the raw value is blank.

    Raises:
        LexidetectConfigError: If the list has blank or duplicate entries.
    """
    if not raw_value.strip():
        return ()
    codes = tuple(code.strip() for code in raw_value.split(ISO_CODE_SEPARATOR))
    _validate_iso_codes(codes)
    return codes


def parse_profile_variant(raw_value: str) -> ProfileVariant:
    """Resolve a profile variant name into the closed variant set.

    Args:
        raw_value: Variant name; empty means "default".

    Returns:
        Supported profile variant.

    Raises:
        LexidetectConfigError: If the name is not a supported variant.
    """
    normalized = raw_value.strip().lower() or "default"
    if normalized in SUPPORTED_PROFILE_VARIANTS:
        return cast(ProfileVariant, normalized)
    raise LexidetectConfigError(
        f"Unsupported profile variant '{raw_value}'. "
        f"Choose one of: {', '.join(SUPPORTED_PROFILE_VARIANTS)}."
    )


def validate_ngram_length(max_ngram_length: int) -> None:
    """Reject n-gram lengths outside the supported range."""
    if not MIN_NGRAM_LENGTH <= max_ngram_length <= MAX_NGRAM_LENGTH:
        raise LexidetectConfigError(
            f"max_ngram_length must be between {MIN_NGRAM_LENGTH} and "
            f"{MAX_NGRAM_LENGTH}, got {max_ngram_length}."
        )


def _validate_iso_codes(codes: tuple[str, ...]) -> None:
    seen: set[str] = set()
    for code in codes:
        if not code or any(character.isspace() for character in code):
            raise LexidetectConfigError(
                f"Invalid ISO code '{code}' in language list. "
                "Use comma-separated codes without blank entries, for example 'en,de'."
            )
        if code in seen:
            raise LexidetectConfigError(f"Duplicate ISO code '{code}' in language list.")
        seen.add(code)


def _parse_int_env(name: str, raw_value: str) -> int:
    """Parse an integer environment value.

    Args:
        name: Environment variable name for error messages.
        raw_value: Raw string from environment.

    Returns:
        Parsed integer.

    Raises:
        LexidetectConfigError: If value cannot be parsed into int.
    """
    try:
        return int(raw_value)
    except ValueError as error:
        raise LexidetectConfigError(
            f"Invalid {name} value: expected integer, got '{raw_value}'. "
            f"Set {name} to a numeric value."
        ) from error
