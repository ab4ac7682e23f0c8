"""
tactile/output/announcer.py — Spoken announcement of the active Braille cell.

Speaks the label and dots of each new cell ("c, dots 1 4", "space, blank")
with pyttsx3 on a dedicated background thread. Fully offline. Only the
newest request is kept: when the learner pages quickly, stale cells are
skipped rather than queued up.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import pyttsx3  # type: ignore[import]

from tactile.core.config import SpeechConfig
from tactile.explore.navigator import Cell

logger = logging.getLogger(__name__)


def describe(cell: Cell) -> str:
    """
    Build the phrase spoken for *cell*.

    Returns:
        e.g. ``'c, dots 1 4'``, ``'the, dots 2 3 4 6'`` or ``'space, blank'``.
    """
    if not cell.pattern:
        return f"{cell.token.label}, blank"
    dots = " ".join(str(d) for d in sorted(cell.pattern))
    return f"{cell.token.label}, dots {dots}"


class CellAnnouncer:
    """
    Offline cell announcements through pyttsx3.

    The speaker thread sleeps on a condition variable until a phrase is
    requested. A request made while another phrase is being spoken replaces
    any phrase still waiting.

    Args:
        config: Speech configuration (rate, volume, voice selection).
    """

    def __init__(self, config: SpeechConfig) -> None:
        """Create the TTS engine and start the speaker thread."""
        self._cfg = config
        self._wakeup = threading.Condition()
        self._next_phrase: Optional[str] = None
        self._stopping = False
        self._engine = self._create_engine(config)
        self._speaker = threading.Thread(
            target=self._speak_loop, name="announcer-speaker", daemon=True
        )
        self._speaker.start()

    @property
    def available(self) -> bool:
        """Return True if a TTS engine could be created."""
        return self._engine is not None

    def announce(self, cell: Cell) -> None:
        """Request that *cell* be described, superseding any waiting phrase."""
        phrase = describe(cell)
        with self._wakeup:
            self._next_phrase = phrase
            self._wakeup.notify()
        logger.debug("Announcer: requested %r", phrase)

    def shutdown(self) -> None:
        """Wake and stop the speaker thread, then stop the engine."""
        with self._wakeup:
            self._stopping = True
            self._wakeup.notify()
        self._speaker.join(timeout=3.0)
        if self._engine is not None:
            try:
                self._engine.stop()
            except Exception as exc:  # noqa: BLE001
                logger.debug("TTS engine stop failed: %s", exc)
        logger.info("CellAnnouncer shut down")

    # ──────────────────────────────────────────
    # Internal
    # ──────────────────────────────────────────

    @staticmethod
    def _create_engine(config: SpeechConfig) -> Optional["pyttsx3.Engine"]:
        """Return a configured engine, or None when no speech driver exists."""
        try:
            engine = pyttsx3.init()
            engine.setProperty("rate", config.rate)
            engine.setProperty("volume", config.volume)
            if config.voice_id:
                engine.setProperty("voice", config.voice_id)
        except Exception as exc:  # noqa: BLE001
            logger.error("Cannot start speech engine (%s) — announcements disabled", exc)
            return None
        logger.info("Announcer ready (rate=%d, volume=%.1f)", config.rate, config.volume)
        return engine

    def _take_phrase(self) -> Optional[str]:
        """Block until a phrase is requested; None means stop."""
        with self._wakeup:
            while self._next_phrase is None and not self._stopping:
                self._wakeup.wait()
            if self._stopping:
                return None
            phrase, self._next_phrase = self._next_phrase, None
            return phrase

    def _speak_loop(self) -> None:
        """Speak requested phrases one at a time until shut down."""
        while True:
            phrase = self._take_phrase()
            if phrase is None:
                return
            if self._engine is None:
                continue
            try:
                self._engine.say(phrase)
                self._engine.runAndWait()
            except Exception as exc:  # noqa: BLE001
                logger.error("Announcement failed for %r: %s", phrase, exc)
