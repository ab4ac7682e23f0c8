"""
tactile/output/router.py — Fan-out of session events to output collaborators.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.constants import EventKind
from tactile.core.session import EventCallback, SessionEvent
from tactile.output.announcer import CellAnnouncer
from tactile.output.haptics import HapticActuator

logger = logging.getLogger(__name__)


class OutputRouter:
    """
    Session observer that drives haptics and speech, then forwards the
    event to any extra listeners (e.g. the UI).

    ``DOT_CONFIRMED`` → one haptic pulse.
    ``CELL_CHANGED`` → spoken cell description, when an announcer is attached.

    Args:
        haptics: Pulse player for confirmed dots.
        announcer: Optional speech output for cell changes.
    """

    def __init__(
        self,
        haptics: Optional[HapticActuator] = None,
        announcer: Optional[CellAnnouncer] = None,
    ) -> None:
        self._haptics = haptics
        self._announcer = announcer
        self._listeners: list[EventCallback] = []

    def add_listener(self, listener: EventCallback) -> None:
        """Register an extra observer called after the built-in outputs."""
        self._listeners.append(listener)

    def __call__(self, event: SessionEvent) -> None:
        if event.kind is EventKind.DOT_CONFIRMED and self._haptics is not None:
            self._haptics.pulse(event.payload.dot)  # type: ignore[union-attr]
        elif event.kind is EventKind.CELL_CHANGED and self._announcer is not None:
            self._announcer.announce(event.payload)  # type: ignore[arg-type]

        for listener in self._listeners:
            try:
                listener(event)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Listener %r raised: %s", listener, exc)

    def shutdown(self) -> None:
        """Stop every attached output worker."""
        if self._haptics is not None:
            self._haptics.shutdown()
        if self._announcer is not None:
            self._announcer.shutdown()
