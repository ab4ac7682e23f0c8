"""
tactile/core/session.py — Orchestration of one tactile Braille learning session.

Owns the engine state (navigator + exploration validator), accepts source
text from background collaborators through a single-slot feed, and emits
events that rendering, haptic and speech collaborators observe. The session
is the single writer of engine state: call every method except
:meth:`TactileSession.submit_text` from one owner thread.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from core.constants import EventKind
from core.logger import SessionJournal, get_journal
from tactile.braille.lexicon import DotPattern
from tactile.braille.tokenizer import TranscriptionSequence, tokenize
from tactile.core.config import TactileConfig, load_config
from tactile.explore.navigator import Cell, Navigator
from tactile.explore.validator import CellGeometry, DotConfirmed, ExplorationValidator
from tactile.input.text_source import TextFeed

logger = logging.getLogger(__name__)


@dataclass
class SessionEvent:
    """
    An event emitted by the session that collaborators can observe.

    Attributes:
        kind: The :class:`~core.constants.EventKind`.
        payload: Event data — a :class:`Cell` for ``CELL_CHANGED`` and
            ``CELL_COMPLETED``, a :class:`DotConfirmed` for ``DOT_CONFIRMED``,
            the token list for ``SEQUENCE_INSTALLED`` and the number of dots
            confirmed during the gesture for ``GESTURE_ENDED``.
        timestamp: Monotonic time of event creation.
    """

    kind: EventKind
    payload: object = None
    timestamp: float = field(default_factory=time.monotonic)


# Type alias for observer callbacks
EventCallback = Callable[[SessionEvent], None]


class TactileSession:
    """
    Single owner of the Braille transcription and exploration state.

    Args:
        geometry: Grid layout of the explored cell.
        on_event: Optional callback invoked with each :class:`SessionEvent`.
        journal: Optional JSONL journal recording the session.
    """

    def __init__(
        self,
        geometry: CellGeometry = CellGeometry(),
        on_event: Optional[EventCallback] = None,
        journal: Optional[SessionJournal] = None,
    ) -> None:
        """Build an empty session."""
        self._on_event = on_event
        self._journal = journal
        self._source_text: str = ""
        self._feed = TextFeed()
        self._validator = ExplorationValidator(geometry=geometry)
        self._navigator = Navigator(
            validator=self._validator,
            on_cell_changed=self._handle_cell_changed,
        )

    @classmethod
    def from_config(
        cls,
        config: TactileConfig | None = None,
        on_event: Optional[EventCallback] = None,
    ) -> "TactileSession":
        """
        Convenience factory: build a session from configuration.

        Opens the process-wide journal when ``logging.log_sessions`` is set.

        Args:
            config: Loaded configuration; auto-discovered when None.
            on_event: Observer callback.

        Returns:
            A ready :class:`TactileSession`.
        """
        config = config or load_config()
        journal = None
        if config.logging.log_sessions:
            journal = get_journal(config.logging.resolved_log_dir)
        return cls(on_event=on_event, journal=journal)

    # ──────────────────────────────────────────
    # Read accessors
    # ──────────────────────────────────────────

    @property
    def source_text(self) -> str:
        """Return the text the installed sequence was built from."""
        return self._source_text

    @property
    def sequence(self) -> tuple:
        """Return the installed token sequence."""
        return self._navigator.sequence

    @property
    def cursor(self) -> int:
        """Return the cursor position."""
        return self._navigator.cursor

    @property
    def navigator(self) -> Navigator:
        """Return the navigator (read access for renderers)."""
        return self._navigator

    @property
    def validator(self) -> ExplorationValidator:
        """Return the exploration validator (read access for renderers)."""
        return self._validator

    @property
    def feed(self) -> TextFeed:
        """Return the handoff feed background producers submit into."""
        return self._feed

    def current(self) -> Cell:
        """Return the active cell (blank placeholder when nothing is installed)."""
        return self._navigator.current()

    def set_observer(self, on_event: Optional[EventCallback]) -> None:
        """Replace the observer callback."""
        self._on_event = on_event

    # ──────────────────────────────────────────
    # Source text
    # ──────────────────────────────────────────

    def load_text(self, text: str, origin: str = "manual") -> Cell:
        """
        Transcribe *text* and install it as the new sequence.

        Args:
            text: A complete recognition or import result.
            origin: Producer description for logs.

        Returns:
            The first cell of the new sequence.
        """
        sequence: TranscriptionSequence = tokenize(text)
        self._source_text = text
        cell = self._navigator.install(sequence)
        logger.info("Loaded %d tokens from %s", len(sequence), origin)
        self._record(
            "transcribe", "sequence_installed",
            {"origin": origin, "chars": len(text), "tokens": len(sequence)},
        )
        self._emit(SessionEvent(EventKind.SEQUENCE_INSTALLED, payload=list(sequence)))
        return cell

    def submit_text(self, text: str, origin: str = "manual") -> None:
        """
        Hand a completed string over from any thread.

        It is installed by the next :meth:`pump` on the owner thread.
        """
        self._feed.submit(text, origin)

    def pump(self) -> bool:
        """
        Install pending source text, if any. Call from the owner thread.

        Returns:
            True if a new sequence was installed.
        """
        item = self._feed.take()
        if item is None:
            return False
        self.load_text(item.text, item.origin)
        return True

    # ──────────────────────────────────────────
    # Navigation
    # ──────────────────────────────────────────

    def previous(self) -> DotPattern:
        """Move to the previous cell (no-op at the start)."""
        return self._navigator.previous()

    def next(self) -> DotPattern:
        """Move to the next cell (no-op at the end)."""
        return self._navigator.next()

    def go_to(self, index: int) -> DotPattern:
        """Jump to the cell at *index* (clamped)."""
        return self._navigator.go_to(index)

    # ──────────────────────────────────────────
    # Touch exploration
    # ──────────────────────────────────────────

    def on_move(self, x: float, y: float) -> Optional[DotConfirmed]:
        """
        Feed one pointer sample of the current gesture.

        Returns:
            The :class:`DotConfirmed` if this sample confirmed a dot.
        """
        confirmed = self._validator.on_move(x, y)
        if confirmed is None:
            return None

        self._record(
            "explore", "dot_confirmed",
            {"dot": confirmed.dot, "cursor": self._navigator.cursor},
        )
        self._emit(SessionEvent(EventKind.DOT_CONFIRMED, payload=confirmed))

        if self._validator.is_complete:
            cell = self._navigator.current()
            logger.info("Cell %r fully traced", cell.token)
            self._emit(SessionEvent(EventKind.CELL_COMPLETED, payload=cell))
        return confirmed

    def on_gesture_end(self) -> None:
        """Close the current gesture; the next touch starts a fresh one."""
        confirmed = len(self._validator.visited)
        self._validator.on_gesture_end()
        self._emit(SessionEvent(EventKind.GESTURE_ENDED, payload=confirmed))

    # ──────────────────────────────────────────
    # Helpers
    # ──────────────────────────────────────────

    def _handle_cell_changed(self, cell: Cell) -> None:
        """Relay a navigator cell change to observers and the journal."""
        self._record(
            "navigate", "cell_changed",
            {"index": cell.index, "token": cell.token.text, "dots": sorted(cell.pattern)},
        )
        self._emit(SessionEvent(EventKind.CELL_CHANGED, payload=cell))

    def _record(self, phase: str, event: str, data: dict, warn: bool = False) -> None:
        """Append an entry to the journal when one is attached."""
        if self._journal is None:
            return
        write = self._journal.warn if warn else self._journal.info
        try:
            write(phase, event, data)
        except OSError as exc:
            logger.warning("Session journal write failed: %s", exc)

    def _emit(self, event: SessionEvent) -> None:
        """
        Invoke the observer callback with an event (swallows observer errors).

        Args:
            event: The event to dispatch.
        """
        if self._on_event is not None:
            try:
                self._on_event(event)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Event callback raised: %s", exc)
                self._record(
                    "observer", "callback_failed",
                    {"kind": event.kind.value, "error": str(exc)}, warn=True,
                )
