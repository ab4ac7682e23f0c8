"""
tactile/braille/lexicon.py — Static Braille lookup tables.

Two read-only tables: the 26 lowercase letters plus space, and a small fixed
set of Unified English Braille whole-word contractions. Dot numbers are the
conventional six-dot numbers 1–6. Tables are built once at import time and
exposed as mapping proxies so nothing can mutate them.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from core.constants import TactileConstants as C

#: A set of raised dot numbers drawn from 1..6.
DotPattern = frozenset[int]

EMPTY_PATTERN: DotPattern = frozenset()


def _pattern(*dots: int) -> DotPattern:
    return frozenset(dots)


# ──────────────────────────────────────────────
# Letters
# ──────────────────────────────────────────────

_LETTERS: dict[str, DotPattern] = {
    "a": _pattern(1),
    "b": _pattern(1, 2),
    "c": _pattern(1, 4),
    "d": _pattern(1, 4, 5),
    "e": _pattern(1, 5),
    "f": _pattern(1, 2, 4),
    "g": _pattern(1, 2, 4, 5),
    "h": _pattern(1, 2, 5),
    "i": _pattern(2, 4),
    "j": _pattern(2, 4, 5),
    "k": _pattern(1, 3),
    "l": _pattern(1, 2, 3),
    "m": _pattern(1, 3, 4),
    "n": _pattern(1, 3, 4, 5),
    "o": _pattern(1, 3, 5),
    "p": _pattern(1, 2, 3, 4),
    "q": _pattern(1, 2, 3, 4, 5),
    "r": _pattern(1, 2, 3, 5),
    "s": _pattern(2, 3, 4),
    "t": _pattern(2, 3, 4, 5),
    "u": _pattern(1, 3, 6),
    "v": _pattern(1, 2, 3, 6),
    "w": _pattern(2, 4, 5, 6),
    "x": _pattern(1, 3, 4, 6),
    "y": _pattern(1, 3, 4, 5, 6),
    "z": _pattern(1, 3, 5, 6),
    " ": EMPTY_PATTERN,
}

# ──────────────────────────────────────────────
# Whole-word contractions (demonstration subset)
# ──────────────────────────────────────────────

# Strong wordsigns with their own cells
_STRONG_WORDSIGNS: dict[str, DotPattern] = {
    "and": _pattern(1, 2, 3, 4, 6),
    "for": _pattern(1, 2, 3, 4, 5, 6),
    "of": _pattern(1, 2, 3, 5, 6),
    "the": _pattern(2, 3, 4, 6),
    "with": _pattern(2, 3, 4, 5, 6),
}

# Alphabetic wordsigns share the cell of their initial letter
_ALPHABETIC_WORDSIGNS: dict[str, str] = {
    "but": "b",
    "can": "c",
    "do": "d",
    "every": "e",
    "from": "f",
    "go": "g",
    "have": "h",
    "just": "j",
    "knowledge": "k",
    "like": "l",
    "more": "m",
    "not": "n",
    "people": "p",
    "quite": "q",
    "rather": "r",
    "so": "s",
    "that": "t",
    "us": "u",
    "very": "v",
    "will": "w",
    "it": "x",
    "you": "y",
    "as": "z",
}

_CONTRACTIONS: dict[str, DotPattern] = dict(_STRONG_WORDSIGNS)
_CONTRACTIONS.update(
    {word: _LETTERS[letter] for word, letter in _ALPHABETIC_WORDSIGNS.items()}
)

LETTER_PATTERNS: Mapping[str, DotPattern] = MappingProxyType(_LETTERS)
"""Read-only letter → pattern table (a–z and space)."""

CONTRACTION_PATTERNS: Mapping[str, DotPattern] = MappingProxyType(_CONTRACTIONS)
"""Read-only contraction word → pattern table."""


# ──────────────────────────────────────────────
# Lookups
# ──────────────────────────────────────────────

def letter_pattern(char: str) -> DotPattern:
    """
    Return the dot pattern for a single character.

    Lookup is case-insensitive. Characters outside the table (digits,
    punctuation, accented letters) yield :data:`EMPTY_PATTERN`.

    Args:
        char: A single character.

    Returns:
        The raised dots for *char*, or the empty pattern.
    """
    return LETTER_PATTERNS.get(char.lower(), EMPTY_PATTERN)


def contraction_pattern(word: str) -> DotPattern:
    """
    Return the dot pattern for a whole-word contraction.

    Lookup is a case-insensitive exact match; prefixes and fragments never
    match. Unknown words yield :data:`EMPTY_PATTERN`.
    """
    return CONTRACTION_PATTERNS.get(word.lower(), EMPTY_PATTERN)


def is_contraction(word: str) -> bool:
    """Return True if *word* is a key of the contraction table."""
    return word.lower() in CONTRACTION_PATTERNS


def to_unicode(pattern: Iterable[int]) -> str:
    """
    Render a dot pattern as a character of the Unicode Braille block.

    Dot *n* sets bit ``n - 1`` above U+2800. Dot numbers outside 1..6 are
    ignored, so the result is always a valid six-dot cell.

    Args:
        pattern: Raised dot numbers.

    Returns:
        A single-character string such as ``'⠮'`` for the pattern of "the".
    """
    bits = 0
    for dot in pattern:
        if C.DOT_MIN <= dot <= C.DOT_MAX:
            bits |= 1 << (dot - 1)
    return chr(C.BRAILLE_BLANK_CODEPOINT + bits)
