"""
tactile/explore/navigator.py — Cursor over a transcription sequence.

The Navigator owns the installed sequence and a clamped cursor into it.
Every navigation operation re-resolves the active cell, hands its pattern to
the exploration validator (which clears the gesture state) and reports a
cell change only when the cursor actually moved or a sequence was installed.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from tactile.braille.lexicon import EMPTY_PATTERN, DotPattern
from tactile.braille.resolver import resolve
from tactile.braille.tokenizer import SPACE_TOKEN, Token
from tactile.explore.validator import ExplorationValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """
    The active cell: a token and its resolved dot pattern.

    Attributes:
        token: Token under the cursor (space placeholder when empty).
        pattern: Raised dots of ``token``.
        index: Cursor position, or -1 for the empty placeholder.
    """

    token: Token
    pattern: DotPattern
    index: int = -1


EMPTY_CELL = Cell(token=SPACE_TOKEN, pattern=EMPTY_PATTERN)

# Type alias for cell-change observers
CellCallback = Callable[[Cell], None]


class Navigator:
    """
    Clamped cursor over an immutable transcription sequence.

    The cursor is always in ``[0, len - 1]`` for a non-empty sequence and
    never wraps. Boundary moves are silent no-ops.

    Args:
        validator: Exploration validator whose pattern follows the cursor.
        on_cell_changed: Optional callback invoked with the new
            :class:`Cell` after an install or an actual cursor move.
    """

    def __init__(
        self,
        validator: Optional[ExplorationValidator] = None,
        on_cell_changed: Optional[CellCallback] = None,
    ) -> None:
        """Start with an empty sequence."""
        self._validator = validator if validator is not None else ExplorationValidator()
        self._on_cell_changed = on_cell_changed
        self._sequence: tuple[Token, ...] = ()
        self._cursor: int = 0
        self._lock = threading.Lock()

    # ──────────────────────────────────────────
    # Read accessors
    # ──────────────────────────────────────────

    @property
    def validator(self) -> ExplorationValidator:
        """Return the validator kept in sync with the cursor."""
        return self._validator

    @property
    def sequence(self) -> tuple[Token, ...]:
        """Return the installed sequence."""
        with self._lock:
            return self._sequence

    @property
    def cursor(self) -> int:
        """Return the cursor position (0 for an empty sequence)."""
        with self._lock:
            return self._cursor

    @property
    def progress(self) -> str:
        """Return a one-based position string such as ``'3 / 12'``."""
        with self._lock:
            if not self._sequence:
                return "0 / 0"
            return f"{self._cursor + 1} / {len(self._sequence)}"

    def __len__(self) -> int:
        with self._lock:
            return len(self._sequence)

    # ──────────────────────────────────────────
    # Operations
    # ──────────────────────────────────────────

    def install(self, sequence: Iterable[Token]) -> Cell:
        """
        Atomically replace the sequence and reset the cursor to 0.

        Always reports a cell change, even for an empty sequence, so
        observers can blank their display.

        Args:
            sequence: Tokens in reading order.

        Returns:
            The new active :class:`Cell`.
        """
        frozen = tuple(sequence)
        with self._lock:
            self._sequence = frozen
            self._cursor = 0
            cell = self._cell_locked()
        logger.info("Installed sequence of %d tokens", len(frozen))
        self._sync(cell, moved=True)
        return cell

    def previous(self) -> DotPattern:
        """Move one cell back if possible; return the active pattern."""
        return self._move(-1)

    def next(self) -> DotPattern:
        """Move one cell forward if possible; return the active pattern."""
        return self._move(+1)

    def go_to(self, index: int) -> DotPattern:
        """Jump to *index*, clamped into range; return the active pattern."""
        with self._lock:
            target = self._clamp(index)
            moved = target != self._cursor
            self._cursor = target
            cell = self._cell_locked()
        self._sync(cell, moved=moved)
        return cell.pattern

    def current(self) -> Cell:
        """Return the active cell, or the blank placeholder when empty."""
        with self._lock:
            return self._cell_locked()

    # ──────────────────────────────────────────
    # Internal helpers
    # ──────────────────────────────────────────

    def _move(self, step: int) -> DotPattern:
        with self._lock:
            target = self._clamp(self._cursor + step)
            moved = target != self._cursor
            self._cursor = target
            cell = self._cell_locked()
        self._sync(cell, moved=moved)
        return cell.pattern

    def _clamp(self, index: int) -> int:
        """Clamp *index* into the valid cursor range. Caller holds the lock."""
        if not self._sequence:
            return 0
        return max(0, min(index, len(self._sequence) - 1))

    def _cell_locked(self) -> Cell:
        """Build the active cell. Caller holds the lock."""
        if not self._sequence:
            return EMPTY_CELL
        token = self._sequence[self._cursor]
        return Cell(token=token, pattern=resolve(token), index=self._cursor)

    def _sync(self, cell: Cell, moved: bool) -> None:
        """
        Push the active pattern to the validator and notify observers.

        The validator is reset on every call; observers only hear about it
        when the cell really changed.
        """
        self._validator.set_pattern(cell.pattern)
        if not moved:
            return
        logger.debug("Cell changed: index=%d token=%r", cell.index, cell.token)
        if self._on_cell_changed is not None:
            try:
                self._on_cell_changed(cell)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Cell-changed callback raised: %s", exc)
