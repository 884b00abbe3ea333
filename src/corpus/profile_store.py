"""Directory-backed profile sets.

Profiles live under <profile_root>/<variant>/<iso_code>.json, one
directory per supported profile variant.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import PROFILE_FILE_SUFFIX
from core.errors import LexidetectConfigError
from core.logging_config import get_logger
from core.types import SUPPORTED_PROFILE_VARIANTS, ProfileVariant
from corpus.language_profile import LanguageProfile, load_profile

_LOGGER = get_logger(__name__)


class ProfileStore:
    """Read-only access to the profile sets below one root directory."""

    def __init__(self, profile_root: str | Path) -> None:
        self._profile_root = Path(profile_root).expanduser()

    @property
    def profile_root(self) -> Path:
        return self._profile_root

    def variant_directory(self, variant: ProfileVariant) -> Path:
        """Return the directory for a variant, which must exist.

        Raises:
            LexidetectConfigError: If the variant is not a supported name
                or its directory is missing.
        """
        if variant not in SUPPORTED_PROFILE_VARIANTS:
            raise LexidetectConfigError(
                f"Unsupported profile variant {variant!r}. "
                f"Choose one of: {', '.join(SUPPORTED_PROFILE_VARIANTS)}."
            )
        directory = self._profile_root / variant
        if not directory.is_dir():
            raise LexidetectConfigError(
                f"Profile set '{variant}' not found at {directory}. "
                "Set profile_root (or LEXIDETECT_PROFILE_ROOT) to a directory "
                "containing one subdirectory per profile variant."
            )
        return directory

    def available_codes(self, variant: ProfileVariant) -> tuple[str, ...]:
        """List ISO codes with a profile in the variant, sorted."""
        directory = self.variant_directory(variant)
        return tuple(
            sorted(
                path.name[: -len(PROFILE_FILE_SUFFIX)]
                for path in directory.iterdir()
                if path.is_file() and path.name.endswith(PROFILE_FILE_SUFFIX)
            )
        )

    def load(self, iso_code: str, variant: ProfileVariant) -> LanguageProfile:
        """Load one language profile from a variant.

        Raises:
            LexidetectConfigError: If no profile exists for iso_code.
            LexidetectProfileError: If the profile file is malformed.
        """
        profile_path = self.variant_directory(variant) / f"{iso_code}{PROFILE_FILE_SUFFIX}"
        if not profile_path.is_file():
            available = ", ".join(self.available_codes(variant)) or "none"
            raise LexidetectConfigError(
                f"Unknown ISO code '{iso_code}' for profile set '{variant}'. "
                f"Available codes: {available}."
            )
        profile = load_profile(profile_path)
        _LOGGER.debug(
            "profile_loaded",
            iso_code=iso_code,
            variant=variant,
            ngram_count=len(profile.ngram_counts),
        )
        return profile
