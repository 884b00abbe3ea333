"""Integration tests for building detectors from on-disk profile sets."""

from __future__ import annotations

import pytest

from core.config import DetectionSettings
from core.errors import LexidetectConfigError
from lexidetect import build_detector
from tests.fixture_paths import fixture_path


def _settings(iso_codes: str, profile: str = "") -> DetectionSettings:
    return DetectionSettings.from_iso_codes(
        iso_codes, profile=profile, profile_root=fixture_path("profiles")
    )


def test_unrestricted_detector_identifies_fixture_languages() -> None:
    """Every fixture language should be recognized from a short phrase."""
    detector = build_detector(_settings(""))

    assert detector.language_codes == ("de", "en", "ja")
    assert detector.detect("the") == "en"
    assert detector.detect("der ein") == "de"
    assert detector.detect("東京に行き ABCDEF") == "ja"


@pytest.mark.parametrize(
    "text",
    ["ｼｰｻｲﾄﾞ_ﾗｲﾅｰ", "㈱_(株)_①②③_㈱㈲㈹", "...", "1234567", "한국어", "東京に行き"],
)
def test_restricted_detector_returns_undetermined_for_other_languages(text: str) -> None:
    """Text outside the configured subset should not get a confident guess."""
    detector = build_detector(_settings("en,de"))

    assert detector.detect_all(text)[0].iso_code == "und"


def test_build_detector_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without explicit settings the environment should configure the detector."""
    monkeypatch.setenv("LEXIDETECT_ISO_CODES", "en")
    monkeypatch.setenv("LEXIDETECT_PROFILE", "short-text")
    monkeypatch.setenv("LEXIDETECT_PROFILE_ROOT", str(fixture_path("profiles")))

    detector = build_detector()

    assert detector.language_codes == ("en",)


def test_build_detector_rejects_unknown_language() -> None:
    """Unknown codes fail while building, before any classification."""
    with pytest.raises(LexidetectConfigError):
        build_detector(_settings("en,ko"))


def test_build_detector_accepts_string_profile_root() -> None:
    """A profile root given as a string should load like a Path."""
    settings = DetectionSettings.from_iso_codes("en", profile_root=str(fixture_path("profiles")))

    assert build_detector(settings).detect("the") == "en"
