"""
tactile/braille/tokenizer.py — Text → ordered Braille transcription tokens.

Whole words found in the contraction table become a single contraction
token; every other word is spelled out one letter token per character.
Exactly one space token follows every word, including the last one.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from tactile.braille.lexicon import is_contraction

logger = logging.getLogger(__name__)

# Tabs and newlines from imported files count as word boundaries
_WHITESPACE = re.compile(r"\s")

_SPACE = " "


class TokenKind(Enum):
    """Kind tag of a transcription token."""

    LETTER = "LETTER"
    CONTRACTION = "CONTRACTION"


@dataclass(frozen=True)
class Token:
    """
    One cell of a transcription sequence.

    Attributes:
        kind: :attr:`TokenKind.LETTER` or :attr:`TokenKind.CONTRACTION`.
        text: The single character (letter tokens) or the whole word
            (contraction tokens), always lowercase.
    """

    kind: TokenKind
    text: str

    @classmethod
    def letter(cls, char: str) -> "Token":
        """Build a letter token for a single character (space included)."""
        if len(char) != 1:
            raise ValueError(f"Letter token needs exactly one character, got {char!r}")
        return cls(TokenKind.LETTER, char.lower())

    @classmethod
    def contraction(cls, word: str) -> "Token":
        """
        Build a contraction token.

        Raises:
            ValueError: If *word* is not in the contraction table.
        """
        if not is_contraction(word):
            raise ValueError(f"{word!r} is not a known contraction")
        return cls(TokenKind.CONTRACTION, word.lower())

    @property
    def is_space(self) -> bool:
        """Return True for the word separator token."""
        return self.kind is TokenKind.LETTER and self.text == _SPACE

    @property
    def label(self) -> str:
        """Human-readable label, e.g. ``'c'``, ``'the'`` or ``'space'``."""
        return "space" if self.is_space else self.text

    def __repr__(self) -> str:
        """Return a compact form such as ``Letter('c')`` or ``Contraction('the')``."""
        name = "Letter" if self.kind is TokenKind.LETTER else "Contraction"
        return f"{name}({self.text!r})"


SPACE_TOKEN = Token(TokenKind.LETTER, _SPACE)

#: Ordered tokens in reading order, built from one input string.
TranscriptionSequence = list[Token]


def normalize(text: str) -> str:
    """Lowercase *text*, turn any whitespace into spaces and trim both ends."""
    return _WHITESPACE.sub(_SPACE, text.lower()).strip()


def tokenize(text: str) -> TranscriptionSequence:
    """
    Convert raw text into an ordered transcription sequence.

    Algorithm:
    1. Normalise: lowercase, whitespace → space, trim.
    2. Split into runs of non-space characters; repeated spaces produce no
       empty words.
    3. A word that is an exact contraction key becomes one contraction
       token; otherwise each character becomes a letter token, including
       characters with no Braille mapping (they resolve to blank cells).
    4. Each word is followed by exactly one space token, the last included.

    The function is pure: the same input always gives the same sequence.

    Args:
        text: Recognised or imported text, fully materialised.

    Returns:
        The token list; empty for empty or all-whitespace input.

    Example::

        >>> tokenize("the cat")
        [Contraction('the'), Letter(' '), Letter('c'), Letter('a'), Letter('t'), Letter(' ')]
    """
    sequence: TranscriptionSequence = []
    for word in normalize(text).split(_SPACE):
        if not word:
            continue
        if is_contraction(word):
            sequence.append(Token(TokenKind.CONTRACTION, word))
        else:
            sequence.extend(Token(TokenKind.LETTER, char) for char in word)
        sequence.append(SPACE_TOKEN)

    logger.debug("Tokenized %d chars into %d tokens", len(text), len(sequence))
    return sequence
