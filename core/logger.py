"""
core/logger.py — JSONL session journal for the Tactile Braille Tutor.

SessionJournal writes one JSON object per line to logs/tactile_{date}.jsonl,
rotating automatically each day. Every installed transcription, cell change
and confirmed dot can be recorded, giving a replayable trace of a learning
session. WARN/ERROR are also mirrored to Python stdlib logging (stderr).
Thread-safe via threading.Lock.

Usage::

    from core.logger import get_journal
    journal = get_journal()
    journal.info("explore", "dot_confirmed", {"dot": 4, "cursor": 2})
"""

from __future__ import annotations

import json
import logging
import platform
import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TextIO

# WARN and ERROR entries are repeated on this stdlib logger
_mirror = logging.getLogger("tactile.journal")

# Journal directory when none is given, relative to the working directory
_LOG_DIR = Path("logs")

# Process-wide instance returned by get_journal()
_instance: Optional["SessionJournal"] = None
_instance_lock = threading.Lock()


class SessionJournal:
    """
    JSONL structured journal of a tactile learning session.

    Each call to a log method appends a single JSON line to
    ``{log_dir}/tactile_{YYYY-MM-DD}.jsonl``. A new file is opened
    automatically when the calendar date changes.

    Fields written per entry:

    .. code-block:: json

        {
          "timestamp_iso": "2026-10-19T09:12:01.482113+00:00",
          "level": "INFO",
          "phase": "explore",
          "event": "dot_confirmed",
          "data": {"dot": 4, "cursor": 2}
        }

    Prefer :func:`get_journal` over direct instantiation; tests construct
    their own instance pointed at a temporary directory.

    Args:
        log_dir: Directory the daily JSONL files are written to.
    """

    def __init__(self, log_dir: Path | str | None = None) -> None:
        """Prepare the journal directory and write the startup entry."""
        self._log_dir = Path(log_dir) if log_dir is not None else _LOG_DIR
        self._lock = threading.Lock()
        self._handle: Optional[TextIO] = None
        self._day: str = ""
        self.info(
            "system", "startup",
            {"python_version": sys.version.split()[0], "platform": platform.platform()},
        )

    @property
    def path(self) -> Path:
        """Return the file for the current journal day."""
        return self._log_dir / f"tactile_{self._day}.jsonl"

    def info(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """
        Append an INFO entry.

        Args:
            phase: Subsystem (e.g. ``'transcribe'``, ``'navigate'``, ``'explore'``).
            event: Short event identifier (e.g. ``'cell_changed'``).
            data: Optional JSON-serialisable context.
        """
        self._append("INFO", phase, event, data)

    def warn(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """Append a WARN entry; also reported on the stdlib mirror logger."""
        self._append("WARN", phase, event, data)
        _mirror.warning("[%s] %s | %s", phase, event, data or {})

    def error(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """Append an ERROR entry; also reported on the stdlib mirror logger."""
        self._append("ERROR", phase, event, data)
        _mirror.error("[%s] %s | %s", phase, event, data or {})

    def flush(self) -> None:
        """Push buffered lines to disk."""
        with self._lock:
            if self._handle is not None:
                self._handle.flush()

    def close(self) -> None:
        """Release the file handle; the next entry opens it again."""
        with self._lock:
            if self._handle is not None:
                self._handle.close()
                self._handle = None

    def _append(self, level: str, phase: str, event: str, data: Optional[dict]) -> None:
        stamp = datetime.now(tz=timezone.utc)
        line = json.dumps(
            {
                "timestamp_iso": stamp.isoformat(),
                "level": level,
                "phase": phase,
                "event": event,
                "data": data or {},
            },
            ensure_ascii=False,
            separators=(",", ":"),
        )
        with self._lock:
            self._handle_for(stamp.date().isoformat()).write(line + "\n")

    def _handle_for(self, day: str) -> TextIO:
        """Return an open handle for *day*, switching files at midnight. Caller holds the lock."""
        if self._handle is not None and day == self._day:
            return self._handle
        if self._handle is not None:
            self._handle.close()
        self._day = day
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._handle = self.path.open("a", encoding="utf-8", buffering=1)
        return self._handle


# ──────────────────────────────────────────────────────────────
# Singleton accessor
# ──────────────────────────────────────────────────────────────

def get_journal(log_dir: Path | str | None = None) -> SessionJournal:
    """
    Return the process-wide :class:`SessionJournal` instance.

    The first call creates the instance (using *log_dir* if given);
    later calls return the same object and ignore *log_dir*.

    Returns:
        The application-wide :class:`SessionJournal`.
    """
    global _instance
    if _instance is None:
        with _instance_lock:
            if _instance is None:
                _instance = SessionJournal(log_dir)
    return _instance
