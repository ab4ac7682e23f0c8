"""
tests/test_logger.py — Tests for the JSONL session journal.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.logger import SessionJournal


def _records(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_startup_entry(tmp_path: Path) -> None:
    journal = SessionJournal(tmp_path)
    journal.flush()
    records = _records(journal.path)
    assert records[0]["event"] == "startup"
    assert records[0]["phase"] == "system"
    assert "python_version" in records[0]["data"]
    assert journal.path.name.startswith("tactile_")
    journal.close()


def test_entries_have_all_fields(tmp_path: Path) -> None:
    journal = SessionJournal(tmp_path)
    journal.info("explore", "dot_confirmed", {"dot": 4, "cursor": 2})
    journal.warn("transcribe", "unknown_word")
    journal.flush()
    records = _records(journal.path)
    assert records[1] == {
        "timestamp_iso": records[1]["timestamp_iso"],
        "level": "INFO",
        "phase": "explore",
        "event": "dot_confirmed",
        "data": {"dot": 4, "cursor": 2},
    }
    assert records[2]["level"] == "WARN"
    assert records[2]["data"] == {}
    journal.close()


def test_write_after_close_reopens(tmp_path: Path) -> None:
    journal = SessionJournal(tmp_path)
    journal.close()
    journal.error("system", "late_write", {"reason": "test"})
    journal.flush()
    events = [r["event"] for r in _records(journal.path)]
    assert events == ["startup", "late_write"]
    journal.close()


def test_creates_missing_directory(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "logs"
    journal = SessionJournal(target)
    assert target.is_dir()
    assert journal.path.parent == target
    journal.close()
