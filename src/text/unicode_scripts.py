"""Unicode script classification for n-gram filtering.

Scripts are derived from the leading word of a character's Unicode name.
Japanese and Chinese writing mixes ideographs with kana, so those blocks
share one script family.
"""

from __future__ import annotations

from functools import lru_cache
import unicodedata

NEUTRAL_SCRIPT = ""
_HAN_FAMILY = "HAN"
_SCRIPT_ALIASES = {
    "CJK": _HAN_FAMILY,
    "HIRAGANA": _HAN_FAMILY,
    "KATAKANA": _HAN_FAMILY,
    "KATAKANA-HIRAGANA": _HAN_FAMILY,
    "IDEOGRAPHIC": _HAN_FAMILY,
}
_NEUTRAL_PREFIXES = ("COMBINING", "MODIFIER")


@lru_cache(maxsize=65536)
def script_of(character: str) -> str:
    """Return the script family of one character.

    Args:
        character: A single character.

    Returns:
        Script family name, or NEUTRAL_SCRIPT for combining and modifier
        characters that attach to any script.
    """
    name = unicodedata.name(character, "")
    if not name:
        return f"U+{ord(character):04X}"
    leading_word = name.split(" ", 1)[0]
    if leading_word in _NEUTRAL_PREFIXES:
        return NEUTRAL_SCRIPT
    return _SCRIPT_ALIASES.get(leading_word, leading_word)


def is_single_script(ngram: str) -> bool:
    """Whether every non-neutral character of ngram shares one script."""
    scripts = {script_of(character) for character in ngram}
    scripts.discard(NEUTRAL_SCRIPT)
    return len(scripts) <= 1
