"""
tactile/braille/resolver.py — Token → dot pattern resolution.
"""

from __future__ import annotations

import logging

from tactile.braille.lexicon import (
    CONTRACTION_PATTERNS,
    EMPTY_PATTERN,
    DotPattern,
    letter_pattern,
    to_unicode,
)
from tactile.braille.tokenizer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)


def resolve(token: Token) -> DotPattern:
    """
    Return the raised dots of *token*. Never raises.

    Letter tokens use the letter table; unmapped characters give the empty
    pattern (a blank cell). Contraction tokens use the contraction table.
    A contraction missing from the table should be impossible given how
    :func:`~tactile.braille.tokenizer.tokenize` builds tokens, so it is
    logged as a tokenizer defect and resolved to the empty pattern.

    Args:
        token: A transcription token.

    Returns:
        The token's :data:`~tactile.braille.lexicon.DotPattern`.
    """
    if token.kind is TokenKind.CONTRACTION:
        pattern = CONTRACTION_PATTERNS.get(token.text)
        if pattern is None:
            logger.warning(
                "Contraction token %r has no lexicon entry — resolving to blank cell",
                token.text,
            )
            return EMPTY_PATTERN
        return pattern
    return letter_pattern(token.text)


def transcribe(text: str) -> str:
    """
    Return the Unicode Braille rendering of *text*, one character per token.

    Used for command-line output and the UI transcript line.
    """
    return "".join(to_unicode(resolve(token)) for token in tokenize(text))
