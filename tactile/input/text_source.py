"""
tactile/input/text_source.py — Source text handoff and plain-text import.

Recognition and file-import collaborators run on background threads. They
hand finished strings to a :class:`TextFeed`; the session's owner thread
drains the feed and installs the newest text. Nothing is ever tokenized
from a partial result.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class TextImportError(RuntimeError):
    """
    Raised when a text file cannot be turned into source text.

    Args:
        path: The file that failed to import.
        reason: Human-readable reason, suitable for a status bar.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot import {path}: {reason}")


@dataclass(frozen=True)
class SourceText:
    """
    A fully materialised source string.

    Attributes:
        text: The text to transcribe.
        origin: Where it came from (e.g. ``'speech'``, ``'file:notes.txt'``).
        timestamp: Monotonic time of submission.
    """

    text: str
    origin: str = "manual"
    timestamp: float = field(default_factory=time.monotonic)


class TextFeed:
    """
    Thread-safe single-slot handoff from producers to the session owner.

    Any thread may :meth:`submit`; only the owner thread should
    :meth:`take`. A newer submission replaces an unconsumed older one, so
    the last completed result wins and stale results are dropped.
    """

    def __init__(self) -> None:
        """Create an empty feed."""
        self._lock = threading.Lock()
        self._pending: Optional[SourceText] = None
        self._dropped: int = 0

    def submit(self, text: str, origin: str = "manual") -> None:
        """
        Offer a completed string for installation.

        Args:
            text: Fully materialised text.
            origin: Short description of the producer.
        """
        item = SourceText(text=text, origin=origin)
        with self._lock:
            if self._pending is not None:
                self._dropped += 1
                logger.debug(
                    "TextFeed: superseding pending text from %s", self._pending.origin
                )
            self._pending = item
        logger.info("TextFeed: received %d chars from %s", len(text), origin)

    def take(self) -> Optional[SourceText]:
        """Return and clear the pending text, or None if there is none."""
        with self._lock:
            item = self._pending
            self._pending = None
            return item

    @property
    def has_pending(self) -> bool:
        """Return True if a submission is waiting."""
        with self._lock:
            return self._pending is not None

    @property
    def dropped(self) -> int:
        """Return how many submissions were superseded before being taken."""
        with self._lock:
            return self._dropped


def read_text_file(
    path: Path | str,
    encoding: str = "utf-8",
    max_chars: int = 20_000,
) -> str:
    """
    Read a plain-text file for transcription.

    Text longer than *max_chars* is truncated with a warning.

    Args:
        path: File to read.
        encoding: Text encoding.
        max_chars: Upper bound on returned characters.

    Returns:
        The file contents.

    Raises:
        TextImportError: If the file is missing or unreadable, *encoding* is
            unknown, the content is not valid in it, or it contains only
            whitespace.
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding=encoding)
    except FileNotFoundError as exc:
        raise TextImportError(file_path, "file not found") from exc
    except UnicodeDecodeError as exc:
        raise TextImportError(file_path, f"not valid {encoding} text") from exc
    except LookupError as exc:
        raise TextImportError(file_path, f"unknown encoding {encoding}") from exc
    except OSError as exc:
        raise TextImportError(file_path, exc.strerror or str(exc)) from exc

    if not text.strip():
        raise TextImportError(file_path, "file contains no text")

    if len(text) > max_chars:
        logger.warning(
            "Imported text truncated from %d to %d chars (%s)",
            len(text), max_chars, file_path.name,
        )
        text = text[:max_chars]

    logger.info("Imported %d chars from %s", len(text), file_path)
    return text
