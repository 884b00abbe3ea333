"""Typed settings-file parsing for declarative detector configuration.

This module loads and validates YAML settings files so services can keep
language subsets and profile variants next to their other deployment
configuration instead of hard-coding them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence, cast

from core.config import DetectionSettings, parse_iso_codes, parse_profile_variant
from core.constants import ISO_CODE_SEPARATOR, SETTINGS_FILE_VERSION
from core.errors import LexidetectConfigError, LexidetectDependencyError

_ALLOWED_KEYS = {
    "version",
    "iso_codes",
    "profile",
    "profile_root",
    "max_text_chars",
    "max_ngram_length",
    "classify_chinese_as_japanese",
    "minimum_certainty",
    "fallback_iso_code",
}


def load_settings_file(settings_path: str) -> DetectionSettings:
    """Load and validate a YAML settings file from disk.

    Args:
        settings_path: File path to the YAML settings file.

    Returns:
        Fully validated detection settings.

    Raises:
        LexidetectDependencyError: If PyYAML is unavailable.
        LexidetectConfigError: If the file is invalid or schema checks fail.
    """
    payload = _load_yaml_payload(settings_path)
    root_mapping = _expect_mapping(payload, "settings root")
    _validate_root_keys(root_mapping)
    _parse_version(root_mapping)
    overrides: dict[str, object] = {}
    profile_root = _optional_string(root_mapping, "profile_root")
    if profile_root is not None:
        overrides["profile_root"] = Path(profile_root).expanduser()
    for field_name in ("max_text_chars", "max_ngram_length"):
        value = _optional_int(root_mapping, field_name)
        if value is not None:
            overrides[field_name] = value
    chinese_as_japanese = root_mapping.get("classify_chinese_as_japanese")
    if chinese_as_japanese is not None:
        if not isinstance(chinese_as_japanese, bool):
            raise LexidetectConfigError(
                "Settings field 'classify_chinese_as_japanese' must be true or false."
            )
        overrides["classify_chinese_as_japanese"] = chinese_as_japanese
    minimum_certainty = _optional_float(root_mapping, "minimum_certainty")
    if minimum_certainty is not None:
        overrides["minimum_certainty"] = minimum_certainty
    fallback_iso_code = _optional_string(root_mapping, "fallback_iso_code")
    if fallback_iso_code is not None:
        overrides["fallback_iso_code"] = fallback_iso_code
    return DetectionSettings(
        iso_codes=_parse_iso_codes(root_mapping),
        profile=parse_profile_variant(_optional_string(root_mapping, "profile") or ""),
        **overrides,  # type: ignore[arg-type]
    )


def _load_yaml_payload(settings_path: str) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise LexidetectDependencyError(
            "YAML settings support requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    settings_file = Path(settings_path).expanduser().resolve()
    if not settings_file.exists():
        raise LexidetectConfigError(
            f"Settings file does not exist at {settings_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(settings_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise LexidetectConfigError(
            f"Failed to read settings at {settings_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise LexidetectConfigError(
            f"Failed to parse YAML settings at {settings_file}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise LexidetectConfigError(
            f"Settings file at {settings_file} is empty. Define at least 'version'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise LexidetectConfigError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise LexidetectConfigError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise LexidetectConfigError(
            f"Settings field 'version' must be an integer. Set version: {SETTINGS_FILE_VERSION}."
        )
    if raw_version != SETTINGS_FILE_VERSION:
        raise LexidetectConfigError(
            f"Unsupported settings version {raw_version}. Use version: {SETTINGS_FILE_VERSION}."
        )
    return raw_version


def _parse_iso_codes(root_mapping: Mapping[str, object]) -> tuple[str, ...]:
    raw_codes = root_mapping.get("iso_codes")
    if raw_codes is None:
        return ()
    if isinstance(raw_codes, str):
        return parse_iso_codes(raw_codes)
    if isinstance(raw_codes, Sequence) and not isinstance(raw_codes, (bytes, bytearray)):
        if not all(isinstance(code, str) for code in raw_codes):
            raise LexidetectConfigError("Settings field 'iso_codes' must list strings only.")
        return parse_iso_codes(ISO_CODE_SEPARATOR.join(cast(Sequence[str], raw_codes)))
    raise LexidetectConfigError(
        "Settings field 'iso_codes' must be a comma-separated string or a list of codes."
    )


def _optional_string(mapping: Mapping[str, object], field_name: str) -> str | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if isinstance(raw_value, str):
        normalized_value = raw_value.strip()
        return normalized_value if normalized_value else None
    raise LexidetectConfigError(f"Settings field '{field_name}' must be a string when provided.")


def _optional_int(mapping: Mapping[str, object], field_name: str) -> int | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if isinstance(raw_value, int) and not isinstance(raw_value, bool):
        return raw_value
    raise LexidetectConfigError(f"Settings field '{field_name}' must be an integer when provided.")


def _optional_float(mapping: Mapping[str, object], field_name: str) -> float | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if isinstance(raw_value, (int, float)) and not isinstance(raw_value, bool):
        return float(raw_value)
    raise LexidetectConfigError(f"Settings field '{field_name}' must be a number when provided.")


def _validate_root_keys(root_mapping: Mapping[str, object]) -> None:
    unknown_keys = sorted(set(root_mapping) - _ALLOWED_KEYS)
    if unknown_keys:
        raise LexidetectConfigError(
            f"Settings file contains unknown fields: {', '.join(unknown_keys)}."
        )
