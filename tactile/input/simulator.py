"""
tactile/input/simulator.py — Scripted pointer input for demo and testing.

Produces the same ``(x, y)`` samples a touch surface would, so the session
can be driven headless. A virtual fingertip can also be stepped across the
grid one dot position at a time with arrow keys.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable

from tactile.explore.validator import CellGeometry

logger = logging.getLogger(__name__)

Point = tuple[float, float]

# Samples generated per dot when tracing, to mimic a finger resting on it
_SAMPLES_PER_DOT: int = 3


class PointerSimulator:
    """
    Virtual fingertip over a Braille cell.

    Key bindings for :meth:`inject_key`:
    - Arrow Left / Right / Up / Down: move one dot position, clamped to the grid.
    - 'r': Return to the centre of dot 1.

    Args:
        geometry: Grid layout the fingertip moves over.
    """

    def __init__(self, geometry: CellGeometry = CellGeometry()) -> None:
        """Place the fingertip on the centre of dot 1."""
        self._geometry = geometry
        self._lock = threading.Lock()
        self._x, self._y = geometry.centre_of(1)

    @property
    def position(self) -> Point:
        """Return the current fingertip position (thread-safe)."""
        with self._lock:
            return (self._x, self._y)

    def inject_key(self, key: str) -> Point:
        """
        Move the fingertip according to a key press.

        Args:
            key: Tkinter keysym string (e.g. ``'Left'``, ``'r'``).

        Returns:
            The new position.
        """
        step = self._geometry.pitch
        first_x, first_y = self._geometry.centre_of(1)
        last_x = first_x + (self._geometry.cols - 1) * step
        last_y = first_y + (self._geometry.rows - 1) * step
        with self._lock:
            if key == "Left":
                self._x = max(first_x, self._x - step)
            elif key == "Right":
                self._x = min(last_x, self._x + step)
            elif key == "Up":
                self._y = max(first_y, self._y - step)
            elif key == "Down":
                self._y = min(last_y, self._y + step)
            elif key == "r":
                self._x, self._y = first_x, first_y
                logger.debug("Simulator: fingertip reset to dot 1")
            return (self._x, self._y)

    def trace(self, dots: Iterable[int]) -> list[Point]:
        """
        Return samples that rest on each dot in turn.

        Each dot gets several samples spread inside its square, so a
        correct validator must still confirm it only once.

        Args:
            dots: Dot numbers in the order they are touched.

        Returns:
            Pointer samples in temporal order.
        """
        samples: list[Point] = []
        quarter = self._geometry.cell_size / 4.0
        for dot in dots:
            cx, cy = self._geometry.centre_of(dot)
            for i in range(_SAMPLES_PER_DOT):
                offset = (i - 1) * quarter
                samples.append((cx + offset, cy + offset))
        return samples

    def sweep(self) -> list[Point]:
        """Return samples that visit every dot position in numeric order."""
        count = self._geometry.rows * self._geometry.cols
        return self.trace(range(1, count + 1))
