"""
tests/test_session.py — Integration tests for tactile.core.session.TactileSession.

Drives the session with PointerSimulator samples and records emitted
events, covering transcription install, navigation, dot confirmation,
cell completion and the background text handoff.
"""

from __future__ import annotations

import json
import threading
import unittest
from pathlib import Path

import pytest

from core.constants import EventKind
from core.logger import SessionJournal
from tactile.braille.tokenizer import SPACE_TOKEN, Token
from tactile.core.config import LoggingConfig, TactileConfig
from tactile.core.session import SessionEvent, TactileSession
from tactile.explore.navigator import Cell
from tactile.explore.validator import DotConfirmed
from tactile.input.simulator import PointerSimulator


class TestSessionTranscription(unittest.TestCase):
    """Tests for installing source text into the session."""

    def setUp(self) -> None:
        self.events: list[SessionEvent] = []
        self.session = TactileSession(on_event=self.events.append)

    def kinds(self) -> list[EventKind]:
        return [e.kind for e in self.events]

    def test_empty_session_has_placeholder(self) -> None:
        """Before any text, the active cell is the blank placeholder."""
        cell = self.session.current()
        self.assertEqual(cell.token, SPACE_TOKEN)
        self.assertEqual(cell.pattern, frozenset())
        self.assertEqual(self.session.sequence, ())

    def test_load_text_emits_cell_then_sequence(self) -> None:
        """load_text() reports the first cell and then the new sequence."""
        cell = self.session.load_text("the cat", origin="test")
        self.assertEqual(
            self.kinds(), [EventKind.CELL_CHANGED, EventKind.SEQUENCE_INSTALLED]
        )
        self.assertEqual(cell.index, 0)
        self.assertEqual(cell.token, Token.contraction("the"))
        self.assertEqual(len(self.events[1].payload), 6)
        self.assertEqual(self.session.source_text, "the cat")

    def test_reload_resets_cursor(self) -> None:
        """Loading new text always starts at the first cell."""
        self.session.load_text("cab")
        self.session.next()
        self.session.next()
        self.session.load_text("dog")
        self.assertEqual(self.session.cursor, 0)
        self.assertEqual(self.session.current().token, Token.letter("d"))

    def test_empty_text_installs_empty_sequence(self) -> None:
        """Whitespace-only text yields an empty sequence, not an error."""
        self.session.load_text("   \n\t ")
        self.assertEqual(self.session.sequence, ())
        self.assertEqual(self.session.current().token, SPACE_TOKEN)

    def test_previous_at_start_emits_nothing(self) -> None:
        """previous() on cell 0 neither moves nor emits."""
        self.session.load_text("a")
        self.events.clear()
        self.session.previous()
        self.assertEqual(self.session.cursor, 0)
        self.assertEqual(self.events, [])

    def test_next_emits_cell_changed(self) -> None:
        """next() reports the new active cell."""
        self.session.load_text("ab")
        self.events.clear()
        pattern = self.session.next()
        self.assertEqual(pattern, frozenset({1, 2}))
        self.assertEqual(self.kinds(), [EventKind.CELL_CHANGED])
        payload = self.events[0].payload
        self.assertIsInstance(payload, Cell)
        self.assertEqual(payload.index, 1)


class TestSessionExploration(unittest.TestCase):
    """Tests for touch exploration driven through the session."""

    def setUp(self) -> None:
        self.events: list[SessionEvent] = []
        self.session = TactileSession(on_event=self.events.append)
        self.session.load_text("c")
        self.events.clear()

    def of_kind(self, kind: EventKind) -> list[SessionEvent]:
        return [e for e in self.events if e.kind is kind]

    def test_tracing_c_completes_cell(self) -> None:
        """Touching dots 1 and 4 of 'c' confirms both and completes the cell."""
        first = self.session.on_move(50, 50)
        second = self.session.on_move(170, 170)
        self.assertIsInstance(first, DotConfirmed)
        self.assertEqual(first.dot, 1)
        self.assertEqual(second.dot, 4)
        self.assertEqual(
            [e.kind for e in self.events],
            [EventKind.DOT_CONFIRMED, EventKind.DOT_CONFIRMED, EventKind.CELL_COMPLETED],
        )
        self.assertEqual(self.events[-1].payload.token, Token.letter("c"))

    def test_repeated_touch_confirms_once(self) -> None:
        """Lingering on a dot does not confirm it again."""
        for _ in range(5):
            self.session.on_move(40, 60)
        self.assertEqual(len(self.of_kind(EventKind.DOT_CONFIRMED)), 1)

    def test_flat_position_confirms_nothing(self) -> None:
        """Dot 2 is flat in 'c'."""
        self.assertIsNone(self.session.on_move(170, 50))
        self.assertEqual(self.events, [])

    def test_gesture_end_allows_reconfirmation(self) -> None:
        """After a gesture ends the same dot can be confirmed again."""
        self.session.on_move(50, 50)
        self.session.on_gesture_end()
        self.session.on_move(50, 50)
        self.assertEqual(len(self.of_kind(EventKind.DOT_CONFIRMED)), 2)
        ended = self.of_kind(EventKind.GESTURE_ENDED)
        self.assertEqual(len(ended), 1)
        self.assertEqual(ended[0].payload, 1)

    def test_navigation_resets_exploration(self) -> None:
        """Moving away and back starts the cell fresh."""
        self.session.on_move(50, 50)
        self.session.next()
        self.session.previous()
        self.assertEqual(self.session.validator.visited, frozenset())
        self.assertIsNotNone(self.session.on_move(50, 50))

    def test_blank_cell_never_completes(self) -> None:
        """Sweeping the separator cell produces no events."""
        self.session.next()
        self.events.clear()
        for x, y in PointerSimulator().sweep():
            self.session.on_move(x, y)
        self.assertEqual(self.events, [])

    def test_out_of_grid_samples_are_ignored(self) -> None:
        """Off-grid and non-finite samples are no-ops."""
        for x, y in ((-1, -1), (500, 50), (float("nan"), 10), (50, float("inf"))):
            self.assertIsNone(self.session.on_move(x, y))
        self.assertEqual(self.events, [])


class TestSessionObserverErrors(unittest.TestCase):
    """Observer failures must never reach the caller."""

    def test_raising_observer_is_swallowed(self) -> None:
        def _boom(event: SessionEvent) -> None:
            raise RuntimeError("renderer crashed")

        session = TactileSession(on_event=_boom)
        session.load_text("c")
        session.next()
        self.assertEqual(session.go_to(0), frozenset({1, 4}))
        self.assertIsNotNone(session.on_move(50, 50))
        session.on_gesture_end()

    def test_set_observer_replaces_callback(self) -> None:
        first: list[SessionEvent] = []
        second: list[SessionEvent] = []
        session = TactileSession(on_event=first.append)
        session.set_observer(second.append)
        session.load_text("a")
        self.assertEqual(first, [])
        self.assertEqual(len(second), 2)


# ──────────────────────────────────────────────
# Background handoff (pytest style)
# ──────────────────────────────────────────────


def test_pump_without_submission_is_noop() -> None:
    session = TactileSession()
    assert session.pump() is False
    assert session.sequence == ()


def test_last_submission_wins() -> None:
    """Two submissions before a pump: only the newer one is installed."""
    session = TactileSession()
    session.submit_text("first", origin="speech")
    session.submit_text("will", origin="speech")
    assert session.feed.dropped == 1
    assert session.pump() is True
    assert session.source_text == "will"
    assert session.current().token == Token.contraction("will")
    assert session.pump() is False


def test_submit_from_worker_thread() -> None:
    """Text produced on another thread is installed by the owner's pump."""
    session = TactileSession()
    worker = threading.Thread(target=session.submit_text, args=("it",))
    worker.start()
    worker.join(timeout=2.0)
    assert session.feed.has_pending
    assert session.pump() is True
    assert [t.text for t in session.sequence] == ["it", " "]


def test_submission_during_exploration_installs_on_pump() -> None:
    """A new result arriving mid-gesture replaces the cell only when pumped."""
    session = TactileSession()
    session.load_text("c")
    session.on_move(50, 50)
    session.submit_text("a")
    assert session.validator.visited == frozenset({1})
    session.pump()
    assert session.validator.visited == frozenset()
    assert session.validator.pattern == frozenset({1})


# ──────────────────────────────────────────────
# Journal
# ──────────────────────────────────────────────


def _read_events(path: Path) -> list[str]:
    with path.open(encoding="utf-8") as fh:
        return [json.loads(line)["event"] for line in fh if line.strip()]


def test_session_writes_journal(tmp_path: Path) -> None:
    journal = SessionJournal(tmp_path)
    session = TactileSession(journal=journal)
    session.load_text("c")
    session.on_move(50, 50)
    journal.flush()

    events = _read_events(journal.path)
    assert events[0] == "startup"
    assert "sequence_installed" in events
    assert "cell_changed" in events
    assert "dot_confirmed" in events
    journal.close()


def test_from_config_without_journal() -> None:
    """from_config() honours logging.log_sessions = false."""
    config = TactileConfig(logging=LoggingConfig(log_sessions=False))
    events: list[SessionEvent] = []
    session = TactileSession.from_config(config, on_event=events.append)
    session.load_text("a")
    assert [e.kind for e in events] == [
        EventKind.CELL_CHANGED,
        EventKind.SEQUENCE_INSTALLED,
    ]


@pytest.mark.parametrize(
    "text, dots",
    [
        ("and", {1, 2, 3, 4, 6}),
        ("for", {1, 2, 3, 4, 5, 6}),
        ("b", {1, 2}),
    ],
)
def test_full_sweep_completes_any_cell(text: str, dots: set[int]) -> None:
    """A sweep of all six positions completes every non-blank cell."""
    events: list[SessionEvent] = []
    session = TactileSession(on_event=events.append)
    session.load_text(text)
    events.clear()
    for x, y in PointerSimulator().sweep():
        session.on_move(x, y)
    confirmed = {e.payload.dot for e in events if e.kind is EventKind.DOT_CONFIRMED}
    assert confirmed == dots
    assert events[-1].kind is EventKind.CELL_COMPLETED


def test_observer_failure_is_journaled(tmp_path: Path) -> None:
    def _boom(event: SessionEvent) -> None:
        raise RuntimeError("renderer crashed")

    journal = SessionJournal(tmp_path)
    session = TactileSession(on_event=_boom, journal=journal)
    session.load_text("a")
    journal.flush()

    with journal.path.open(encoding="utf-8") as fh:
        failures = [
            json.loads(line) for line in fh
            if json.loads(line)["event"] == "callback_failed"
        ]
    assert failures
    assert failures[0]["level"] == "WARN"
    assert failures[0]["data"]["kind"] == "CELL_CHANGED"
    journal.close()
