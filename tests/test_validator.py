"""
tests/test_validator.py — Unit tests for pointer → dot mapping and
per-gesture dot confirmation.

Uses synthetic coordinates — no display or touch hardware required.
"""

from __future__ import annotations

import math
import unittest

from tactile.braille.lexicon import EMPTY_PATTERN, contraction_pattern, letter_pattern
from tactile.explore.validator import (
    CellGeometry,
    DotAddress,
    DotConfirmed,
    ExplorationValidator,
    locate,
)


class TestCellGeometry(unittest.TestCase):
    """Tests for the fixed cell layout."""

    def setUp(self) -> None:
        """Use the default 3×2 grid of 100px squares with 20px gaps."""
        self.geometry = CellGeometry()

    def test_defaults(self) -> None:
        """Defaults match the fixed layout."""
        self.assertEqual(self.geometry.rows, 3)
        self.assertEqual(self.geometry.cols, 2)
        self.assertEqual(self.geometry.pitch, 120.0)

    def test_extent(self) -> None:
        """Drawn size excludes the trailing gap."""
        self.assertEqual(self.geometry.width, 220.0)
        self.assertEqual(self.geometry.height, 340.0)

    def test_centres_round_trip_through_locate(self) -> None:
        """The centre of every dot locates back to that dot."""
        for dot in range(1, 7):
            x, y = self.geometry.centre_of(dot)
            address = locate(x, y, self.geometry)
            self.assertIsNotNone(address)
            assert address is not None
            self.assertEqual(address.dot, dot)


class TestLocate(unittest.TestCase):
    """Tests for coordinate quantisation."""

    def test_first_square(self) -> None:
        """(50, 50) is row 0, col 0, dot 1."""
        address = locate(50, 50, CellGeometry(cell_size=100, gap=20))
        self.assertEqual(address, DotAddress(row=0, col=0))
        assert address is not None
        self.assertEqual(address.dot, 1)

    def test_row_major_numbering(self) -> None:
        """Dots are numbered row by row: (0,1) is 2, (1,0) is 3, (2,1) is 6."""
        self.assertEqual(locate(170, 50).dot, 2)  # type: ignore[union-attr]
        self.assertEqual(locate(50, 170).dot, 3)  # type: ignore[union-attr]
        self.assertEqual(locate(170, 290).dot, 6)  # type: ignore[union-attr]

    def test_gap_belongs_to_preceding_square(self) -> None:
        """x=110 lies in the gap after column 0 and still maps to column 0."""
        self.assertEqual(locate(110, 10).dot, 1)  # type: ignore[union-attr]

    def test_out_of_grid_is_none(self) -> None:
        """Positions beyond the grid name no dot."""
        for x, y in ((250, 50), (50, 370), (-1, 50), (50, -0.5), (1e9, 1e9)):
            self.assertIsNone(locate(x, y), f"({x}, {y})")

    def test_non_finite_is_none(self) -> None:
        """NaN and infinite coordinates name no dot."""
        self.assertIsNone(locate(math.nan, 10))
        self.assertIsNone(locate(10, math.inf))

    def test_address_validity(self) -> None:
        """DotAddress.is_valid checks row, column and dot range."""
        geometry = CellGeometry()
        self.assertTrue(DotAddress(2, 1).is_valid(geometry))
        self.assertFalse(DotAddress(3, 0).is_valid(geometry))
        self.assertFalse(DotAddress(0, 2).is_valid(geometry))


class TestExplorationValidator(unittest.TestCase):
    """Tests for exactly-once confirmation within a gesture."""

    def setUp(self) -> None:
        """Validator over the default grid, recording callbacks."""
        self.confirmed: list[DotConfirmed] = []
        self.validator = ExplorationValidator(on_dot_confirmed=self.confirmed.append)

    def test_confirms_raised_dot_once(self) -> None:
        """Touching dot 1 of 'a' twice confirms it once."""
        self.validator.set_pattern(letter_pattern("a"))
        first = self.validator.on_move(50, 50)
        second = self.validator.on_move(55, 60)
        self.assertIsNotNone(first)
        assert first is not None
        self.assertEqual(first.dot, 1)
        self.assertIsNone(second)
        self.assertEqual([e.dot for e in self.confirmed], [1])

    def test_flat_position_never_confirms(self) -> None:
        """Touching a dot that is not raised produces nothing."""
        self.validator.set_pattern(letter_pattern("a"))
        self.assertIsNone(self.validator.on_move(170, 50))
        self.assertEqual(self.validator.visited, frozenset())

    def test_out_of_grid_is_ignored(self) -> None:
        """Off-grid samples neither confirm nor change state."""
        self.validator.set_pattern(frozenset({1, 2, 3, 4, 5, 6}))
        self.assertIsNone(self.validator.on_move(500, 500))
        self.assertEqual(self.validator.visited, frozenset())

    def test_gesture_end_allows_reconfirmation(self) -> None:
        """After the gesture ends the same dot can be confirmed again."""
        self.validator.set_pattern(letter_pattern("a"))
        self.validator.on_move(50, 50)
        self.validator.on_gesture_end()
        self.assertEqual(self.validator.visited, frozenset())
        self.assertIsNotNone(self.validator.on_move(50, 50))
        self.assertEqual(len(self.confirmed), 2)

    def test_set_pattern_clears_visited(self) -> None:
        """Installing a new pattern forgets the visited dots."""
        self.validator.set_pattern(letter_pattern("a"))
        self.validator.on_move(50, 50)
        self.validator.set_pattern(letter_pattern("b"))
        self.assertEqual(self.validator.visited, frozenset())
        self.assertEqual(self.validator.pattern, frozenset({1, 2}))

    def test_remaining_and_completion(self) -> None:
        """'the' is complete once dots 2, 3, 4 and 6 are touched."""
        geometry = self.validator.geometry
        self.validator.set_pattern(contraction_pattern("the"))
        for dot in (2, 3, 4):
            self.validator.on_move(*geometry.centre_of(dot))
        self.assertEqual(self.validator.remaining, frozenset({6}))
        self.assertFalse(self.validator.is_complete)
        self.validator.on_move(*geometry.centre_of(6))
        self.assertTrue(self.validator.is_complete)

    def test_blank_cell_is_never_complete(self) -> None:
        """The space cell has nothing to find."""
        self.validator.set_pattern(EMPTY_PATTERN)
        self.validator.on_move(50, 50)
        self.assertFalse(self.validator.is_complete)

    def test_sweep_confirms_each_raised_dot_once(self) -> None:
        """Dragging over all six squares twice confirms exactly the pattern."""
        geometry = self.validator.geometry
        self.validator.set_pattern(letter_pattern("y"))
        for _ in range(2):
            for dot in range(1, 7):
                self.validator.on_move(*geometry.centre_of(dot))
        self.assertEqual(sorted(e.dot for e in self.confirmed), [1, 3, 4, 5, 6])

    def test_callback_error_is_swallowed(self) -> None:
        """A failing observer does not break confirmation."""
        def _boom(event: DotConfirmed) -> None:
            raise RuntimeError("haptics offline")

        validator = ExplorationValidator(on_dot_confirmed=_boom)
        validator.set_pattern(letter_pattern("a"))
        self.assertIsNotNone(validator.on_move(50, 50))
        self.assertEqual(validator.visited, frozenset({1}))


if __name__ == "__main__":
    unittest.main()
