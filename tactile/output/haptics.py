"""
tactile/output/haptics.py — Haptic confirmation pulses for confirmed dots.

Pulses are queued and played by a daemon worker thread so the pointer
handling path never blocks on the output device. Without vibration hardware
the default backend rings the terminal bell; the ``log`` backend only logs.
"""

from __future__ import annotations

import logging
import queue
import sys
import threading
import time
from typing import Callable, Optional

from tactile.core.config import HapticsConfig

logger = logging.getLogger(__name__)

# Signature of a pulse sink: called with (dot, pulse_ms)
PulseSink = Callable[[int, int], None]

_STOP = object()


def _bell_sink(dot: int, pulse_ms: int) -> None:
    """Ring the terminal bell once."""
    sys.stdout.write("\a")
    sys.stdout.flush()


def _log_sink(dot: int, pulse_ms: int) -> None:
    """Record the pulse in the log only."""
    logger.info("Haptic pulse: dot %d (%d ms)", dot, pulse_ms)


_BACKENDS: dict[str, PulseSink] = {
    "bell": _bell_sink,
    "log": _log_sink,
}


class HapticActuator:
    """
    Background haptic pulse player.

    Args:
        config: Haptics configuration (enabled flag, backend, pulse length).
        sink: Optional pulse sink overriding the configured backend.
    """

    def __init__(self, config: HapticsConfig, sink: Optional[PulseSink] = None) -> None:
        """Pick the backend and start the worker thread."""
        self._cfg = config
        self._sink: PulseSink = sink or _BACKENDS[config.backend]
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._pulses_played: int = 0
        self._worker: Optional[threading.Thread] = None

        if config.enabled:
            self._worker = threading.Thread(
                target=self._worker_loop, name="haptics-worker", daemon=True
            )
            self._worker.start()
            logger.info(
                "HapticActuator started (backend=%s, pulse=%dms)",
                config.backend, config.pulse_ms,
            )
        else:
            logger.info("HapticActuator disabled by config")

    # ──────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────

    @property
    def enabled(self) -> bool:
        """Return True if pulses are being played."""
        return self._worker is not None

    @property
    def pulses_played(self) -> int:
        """Return the number of pulses delivered to the sink so far."""
        return self._pulses_played

    def pulse(self, dot: int) -> None:
        """
        Queue one confirmation pulse.

        Args:
            dot: The confirmed dot number (for logging/sinks).
        """
        if self._worker is None:
            return
        self._queue.put(dot)

    def wait_idle(self, timeout: float = 2.0) -> bool:
        """
        Block until every queued pulse has been played.

        Returns:
            True if the queue drained within *timeout*.
        """
        deadline = time.monotonic() + timeout
        while self._queue.unfinished_tasks:
            if time.monotonic() >= deadline:
                return False
            time.sleep(0.005)
        return True

    def shutdown(self) -> None:
        """Stop the worker thread. Safe to call multiple times."""
        if self._worker is None:
            return
        self._queue.put(_STOP)
        self._worker.join(timeout=2.0)
        self._worker = None
        logger.info("HapticActuator shut down")

    # ──────────────────────────────────────────
    # Internal
    # ──────────────────────────────────────────

    def _worker_loop(self) -> None:
        """Drain the pulse queue until the stop sentinel arrives."""
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._sink(int(item), self._cfg.pulse_ms)  # type: ignore[call-overload]
                self._pulses_played += 1
            except Exception as exc:  # noqa: BLE001
                logger.error("Haptic pulse failed: %s", exc)
            finally:
                self._queue.task_done()
