"""
main.py — Tactile Braille Tutor application entry point.

Parses CLI args, loads configuration, and either opens the Tkinter tutor or
runs headless: printing the Braille transcription and, in demo mode,
tracing every cell with the pointer simulator.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import Optional

from core.constants import EventKind
from tactile.braille.lexicon import to_unicode
from tactile.braille.resolver import transcribe
from tactile.core.config import TactileConfig, load_config
from tactile.core.session import SessionEvent, TactileSession
from tactile.explore.navigator import Cell
from tactile.input.simulator import PointerSimulator
from tactile.input.text_source import TextImportError, read_text_file
from tactile.output.announcer import CellAnnouncer
from tactile.output.haptics import HapticActuator
from tactile.output.router import OutputRouter

logger = logging.getLogger("tactile.main")


# ──────────────────────────────────────────────────────────────
# Argument parsing
# ──────────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tactile-tutor",
        description="Tactile Braille Tutor — learn six-dot Braille by touch",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    source = p.add_mutually_exclusive_group()
    source.add_argument("--text", default=None, help="Sentence to transcribe")
    source.add_argument("--file", default=None, help="Plain-text file to transcribe")
    p.add_argument(
        "--config",
        default=None,
        help="Path to tactile.yaml. Auto-discovers if not specified.",
    )
    p.add_argument(
        "--no-gui",
        action="store_true",
        help="Run headless — print the transcription instead of opening a window",
    )
    p.add_argument(
        "--demo",
        action="store_true",
        help="Headless only: trace every cell with the pointer simulator",
    )
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Minimum log level (defaults to logging.level from config)",
    )
    return p


def _setup_logging(level: str) -> None:
    """
    Configure the root logger for the application.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
    """
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )


# ──────────────────────────────────────────────────────────────
# Headless mode
# ──────────────────────────────────────────────────────────────

def _print_cell(cell: Cell) -> None:
    """Print one cell header line."""
    dots = ",".join(str(d) for d in sorted(cell.pattern)) or "-"
    print(f"  cell {cell.index:3d}  {to_unicode(cell.pattern)}  {cell.token.label:<10} dots {dots}")


def _print_event(event: SessionEvent) -> None:
    """Echo exploration events to stdout."""
    if event.kind is EventKind.DOT_CONFIRMED:
        print(f"      ✓ dot {event.payload.dot}")  # type: ignore[union-attr]
    elif event.kind is EventKind.CELL_COMPLETED:
        print("      ★ cell complete")


def _run_headless(session: TactileSession, router: OutputRouter, demo: bool) -> int:
    """
    Print the transcription; with *demo*, sweep every cell.

    Returns:
        Process exit code.
    """
    if demo:
        router.add_listener(_print_event)

    print(f"Input: {session.source_text.strip()}")
    print(f"Braille: {transcribe(session.source_text)}")

    if not demo:
        return 0

    simulator = PointerSimulator(session.validator.geometry)
    for index in range(len(session.sequence)):
        session.go_to(index)
        _print_cell(session.current())
        for x, y in simulator.sweep():
            session.on_move(x, y)
        session.on_gesture_end()
    return 0


# ──────────────────────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────────────────────

def _load_source(args: argparse.Namespace, config: TactileConfig) -> Optional[str]:
    """Return the initial source text, or None when none was given."""
    if args.text is not None:
        return args.text
    if args.file is not None:
        return read_text_file(
            args.file,
            encoding=config.importer.encoding,
            max_chars=config.importer.max_chars,
        )
    return None


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the Tactile Braille Tutor.

    Returns:
        Process exit code.
    """
    args = _build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2

    _setup_logging(args.log_level or config.logging.level)

    try:
        source = _load_source(args, config)
    except TextImportError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    headless = args.no_gui or args.demo
    haptics_cfg = config.haptics
    if headless:
        haptics_cfg = dataclasses.replace(haptics_cfg, backend="log")
    haptics = HapticActuator(haptics_cfg)
    announcer = None
    if config.speech.announce_cells and not headless:
        announcer = CellAnnouncer(config.speech)
    router = OutputRouter(haptics=haptics, announcer=announcer)
    session = TactileSession.from_config(config, on_event=router)

    if source is not None:
        session.load_text(source, origin="file" if args.file else "cli")

    if headless:
        try:
            return _run_headless(session, router, demo=args.demo)
        finally:
            haptics.wait_idle()
            router.shutdown()

    from ui.app import TutorApp

    app = TutorApp(config=config, session=session, router=router)
    try:
        app.mainloop()
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt — exiting")
        router.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
