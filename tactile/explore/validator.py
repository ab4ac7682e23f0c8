"""
tactile/explore/validator.py — Pointer coordinates → confirmed Braille dots.

Maps continuous pointer positions onto the 3×2 dot grid of one cell and
confirms each raised dot at most once per touch gesture. Confirmations are
the only trigger for haptic feedback.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from core.constants import C
from tactile.braille.lexicon import EMPTY_PATTERN, DotPattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CellGeometry:
    """
    Layout of the on-screen Braille cell.

    Attributes:
        rows: Dot rows per cell.
        cols: Dot columns per cell.
        cell_size: Edge length of one square dot position.
        gap: Spacing between adjacent dot positions.
    """

    rows: int = C.GRID_ROWS
    cols: int = C.GRID_COLS
    cell_size: float = C.CELL_SIZE_PX
    gap: float = C.CELL_GAP_PX

    @property
    def pitch(self) -> float:
        """Distance between the origins of two adjacent dot positions."""
        return self.cell_size + self.gap

    @property
    def width(self) -> float:
        """Total drawn width of the grid."""
        return self.cols * self.cell_size + (self.cols - 1) * self.gap

    @property
    def height(self) -> float:
        """Total drawn height of the grid."""
        return self.rows * self.cell_size + (self.rows - 1) * self.gap

    def origin_of(self, dot: int) -> tuple[float, float]:
        """Return the top-left ``(x, y)`` of the square for *dot*."""
        index = dot - 1
        row, col = divmod(index, self.cols)
        return (col * self.pitch, row * self.pitch)

    def centre_of(self, dot: int) -> tuple[float, float]:
        """Return the centre ``(x, y)`` of the square for *dot*."""
        x, y = self.origin_of(dot)
        half = self.cell_size / 2.0
        return (x + half, y + half)


@dataclass(frozen=True)
class DotAddress:
    """
    A discrete ``(row, col)`` location on the dot grid.

    Attributes:
        row: Grid row (0-indexed, top to bottom).
        col: Grid column (0-indexed, left to right).
        cols: Column count of the grid the address belongs to.
    """

    row: int
    col: int
    cols: int = C.GRID_COLS

    @property
    def dot(self) -> int:
        """Dot number ``row * cols + col + 1``."""
        return self.row * self.cols + self.col + 1

    def is_valid(self, geometry: CellGeometry) -> bool:
        """Return True if the address lies on *geometry* and names dot 1..6."""
        return (
            0 <= self.row < geometry.rows
            and 0 <= self.col < geometry.cols
            and C.DOT_MIN <= self.dot <= C.DOT_MAX
        )


@dataclass(frozen=True)
class DotConfirmed:
    """
    A raised dot touched for the first time in the current gesture.

    Attributes:
        dot: The confirmed dot number (1–6).
        x: Pointer X that confirmed the dot.
        y: Pointer Y that confirmed the dot.
        timestamp: Monotonic time of confirmation.
    """

    dot: int
    x: float
    y: float
    timestamp: float = field(default_factory=time.monotonic)


def locate(x: float, y: float, geometry: CellGeometry = CellGeometry()) -> Optional[DotAddress]:
    """
    Quantise a pointer position to a dot address.

    ``row = floor(y / pitch)`` and ``col = floor(x / pitch)``. Positions in
    the gap after a square count as that square. Anything off the grid,
    or a non-finite coordinate, is "no dot".

    Args:
        x: Pointer X in grid-local units.
        y: Pointer Y in grid-local units.
        geometry: Grid layout.

    Returns:
        The :class:`DotAddress`, or None if the position names no dot.
    """
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    address = DotAddress(
        row=math.floor(y / geometry.pitch),
        col=math.floor(x / geometry.pitch),
        cols=geometry.cols,
    )
    if not address.is_valid(geometry):
        return None
    return address


class ExplorationValidator:
    """
    Stateful per-gesture dot confirmation against the active pattern.

    Each pointer sample is mapped to a dot. A dot in the active pattern that
    has not yet been visited in this gesture is confirmed exactly once;
    repeated touches and touches on flat positions produce nothing. The
    visited set survives until the gesture ends or the pattern changes.

    Args:
        geometry: Grid layout used to quantise pointer positions.
        on_dot_confirmed: Optional callback invoked with each
            :class:`DotConfirmed`.
    """

    def __init__(
        self,
        geometry: CellGeometry = CellGeometry(),
        on_dot_confirmed: Optional[Callable[[DotConfirmed], None]] = None,
    ) -> None:
        """Start with the empty pattern and no open gesture."""
        self._geometry = geometry
        self._on_dot_confirmed = on_dot_confirmed
        self._pattern: DotPattern = EMPTY_PATTERN
        self._visited: set[int] = set()

    @property
    def geometry(self) -> CellGeometry:
        """Return the grid layout."""
        return self._geometry

    @property
    def pattern(self) -> DotPattern:
        """Return the active dot pattern."""
        return self._pattern

    @property
    def visited(self) -> frozenset[int]:
        """Return the dots confirmed so far in the current gesture."""
        return frozenset(self._visited)

    @property
    def remaining(self) -> frozenset[int]:
        """Return the raised dots not yet confirmed in the current gesture."""
        return self._pattern - self._visited

    @property
    def is_complete(self) -> bool:
        """True once every raised dot has been confirmed (never for a blank cell)."""
        return bool(self._pattern) and not self.remaining

    def set_pattern(self, pattern: DotPattern) -> None:
        """Install a new active pattern and forget the visited dots."""
        self._pattern = frozenset(pattern)
        self._visited.clear()

    def on_move(self, x: float, y: float) -> Optional[DotConfirmed]:
        """
        Process one pointer sample.

        Args:
            x: Pointer X in grid-local units.
            y: Pointer Y in grid-local units.

        Returns:
            A :class:`DotConfirmed` if this sample confirmed a new raised
            dot, else None.
        """
        address = locate(x, y, self._geometry)
        if address is None:
            return None

        dot = address.dot
        if dot not in self._pattern or dot in self._visited:
            return None

        self._visited.add(dot)
        event = DotConfirmed(dot=dot, x=x, y=y)
        logger.debug("Dot %d confirmed at (%.1f, %.1f)", dot, x, y)

        if self._on_dot_confirmed is not None:
            try:
                self._on_dot_confirmed(event)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Dot-confirmed callback raised: %s", exc)
        return event

    def on_gesture_end(self) -> None:
        """Close the current gesture: clear the visited set unconditionally."""
        if self._visited:
            logger.debug("Gesture ended after %d confirmed dot(s)", len(self._visited))
        self._visited.clear()
