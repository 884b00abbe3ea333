"""Text normalization for language detection.

This module turns arbitrary Unicode input into a canonical sequence of
letter runs separated by single spaces. The output is what both the
detector and profile tooling extract n-grams from.
"""

from __future__ import annotations

import re
import unicodedata

_URL_PATTERN = re.compile(r"https?://[-_.?&~;+=/#0-9A-Za-z]{1,2076}")
_EMAIL_PATTERN = re.compile(r"[-_.0-9A-Za-z]{1,64}@[-_0-9A-Za-z]{1,255}[-_.0-9A-Za-z]{1,255}")
_LATIN_EXTENDED_ADDITIONAL = (0x1E00, 0x1EFF)


def normalize_text(text: str) -> str:
    """Normalize raw text into space-separated letter runs.

    Full-width Latin and half-width Katakana are folded to their canonical
    forms, URLs and e-mail addresses are dropped, every character that is
    neither a letter nor a combining mark becomes a separator, and ASCII
    letters are dropped when they are a small minority next to another
    script. The result is idempotent: normalizing it again is a no-op.

    Args:
        text: Raw input text.

    Returns:
        Sanitized text, empty when nothing letter-like remains.
    """
    if not text:
        return ""
    folded = unicodedata.normalize("NFKC", text)
    folded = _URL_PATTERN.sub(" ", folded)
    folded = _EMAIL_PATTERN.sub(" ", folded)
    characters = [character if _is_letter_or_mark(character) else " " for character in folded]
    if _is_latin_minority(characters):
        characters = [" " if _is_ascii_letter(character) else character for character in characters]
    return " ".join("".join(characters).split())


def _is_letter_or_mark(character: str) -> bool:
    return unicodedata.category(character)[0] in ("L", "M")


def _is_ascii_letter(character: str) -> bool:
    return ("A" <= character <= "Z") or ("a" <= character <= "z")


def _is_latin_minority(characters: list[str]) -> bool:
    """Whether ASCII letters are outnumbered two to one by other scripts."""
    latin_count = 0
    non_latin_count = 0
    for character in characters:
        if _is_ascii_letter(character):
            latin_count += 1
        elif character.isalpha() and _is_non_latin_code_point(ord(character)):
            non_latin_count += 1
    return latin_count * 2 < non_latin_count


def _is_non_latin_code_point(code_point: int) -> bool:
    low, high = _LATIN_EXTENDED_ADDITIONAL
    return code_point >= 0x0300 and not low <= code_point <= high
