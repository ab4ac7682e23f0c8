"""
core/constants.py — Process-wide constants for the Tactile Braille Tutor.

The event kinds emitted by the exploration engine, plus a frozen dataclass of
typed constant groups: cell grid geometry, dot numbering bounds and the
Unicode Braille block.
Geometry is fixed and is not part of the YAML config.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


# ──────────────────────────────────────────────────────────────
# Event kinds
# ──────────────────────────────────────────────────────────────

class EventKind(Enum):
    """All event kinds emitted by :class:`tactile.core.session.TactileSession`."""

    SEQUENCE_INSTALLED = "SEQUENCE_INSTALLED"
    CELL_CHANGED = "CELL_CHANGED"
    DOT_CONFIRMED = "DOT_CONFIRMED"
    CELL_COMPLETED = "CELL_COMPLETED"
    GESTURE_ENDED = "GESTURE_ENDED"


# ──────────────────────────────────────────────────────────────
# Frozen constants dataclass
# ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TactileConstants:
    """
    Frozen dataclass holding the fixed Braille cell constants.

    Use the class attributes directly — do not instantiate this class.

    Example::

        from core.constants import TactileConstants as C

        print(C.GRID_ROWS)      # 3
        print(C.CELL_SIZE_PX)   # 100.0
    """

    # ── Cell grid geometry ────────────────────────────────────
    GRID_ROWS: ClassVar[int] = 3
    """Rows of dot positions in one Braille cell."""

    GRID_COLS: ClassVar[int] = 2
    """Columns of dot positions in one Braille cell."""

    CELL_SIZE_PX: ClassVar[float] = 100.0
    """Edge length of one square dot position, in pointer units."""

    CELL_GAP_PX: ClassVar[float] = 20.0
    """Gap between adjacent dot positions, in pointer units."""

    # ── Dot numbering ─────────────────────────────────────────
    DOT_MIN: ClassVar[int] = 1
    """Lowest valid dot number (top-left)."""

    DOT_MAX: ClassVar[int] = 6
    """Highest valid dot number (bottom-right)."""

    # ── Unicode rendering ─────────────────────────────────────
    BRAILLE_BLANK_CODEPOINT: ClassVar[int] = 0x2800
    """Unicode codepoint of the blank Braille cell (U+2800)."""


# ──────────────────────────────────────────────────────────────
# Module-level convenience alias
# ──────────────────────────────────────────────────────────────

#: Convenience alias — ``from core.constants import C``
C = TactileConstants
