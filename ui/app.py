"""
ui/app.py — Tactile Braille Tutor Tkinter application.

Layout: source text entry (top) | transcript + active cell label |
3×2 Braille cell canvas (centre) | navigation buttons | status bar.
Dragging the pointer across the canvas explores the cell; every raised dot
touched for the first time in a drag lights up and triggers a haptic pulse.
"""

from __future__ import annotations

import logging
import threading
import tkinter as tk
from tkinter import filedialog
from tkinter import font as tkfont

from core.constants import EventKind
from tactile.braille.lexicon import to_unicode
from tactile.braille.resolver import resolve
from tactile.core.config import TactileConfig
from tactile.core.session import SessionEvent, TactileSession
from tactile.explore.navigator import Cell
from tactile.input.text_source import TextImportError, read_text_file
from tactile.output.router import OutputRouter

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────
# Colour palettes (high contrast), keyed by ui.theme
# ──────────────────────────────────────────────
PALETTES: dict[str, dict[str, str]] = {
    "light": {
        "bg_main": "#f5f5f0",
        "bg_square": "#d9d9d9",
        "fg_raised": "#1c1c1c",
        "fg_confirmed": "#27ae60",
        "text_primary": "#1c1c1c",
        "text_secondary": "#5d6d7e",
    },
    "dark": {
        "bg_main": "#1a1a2e",
        "bg_square": "#34495e",
        "fg_raised": "#ecf0f1",
        "fg_confirmed": "#2ecc71",
        "text_primary": "#ecf0f1",
        "text_secondary": "#95a5a6",
    },
}

# Inset of the raised-dot fill inside its square
_DOT_INSET = 12
# Empty border around the grid inside the canvas
_CANVAS_MARGIN = 20
# Feed poll period (ms) for text arriving from background threads
_FEED_POLL_MS = 100

STATUS_EXPLORE = "Drag across the cell to find the raised dots"
STATUS_COMPLETE = "All dots found — press Next ▶ to continue"


def status_for(event: SessionEvent) -> str | None:
    """
    Return the status-bar text an event calls for, or None to leave it.

    A new active cell always replaces a stale completion message.
    """
    if event.kind is EventKind.CELL_CHANGED:
        cell = event.payload
        if isinstance(cell, Cell) and not cell.pattern:
            return "Blank cell — press Next ▶ to continue"
        return STATUS_EXPLORE
    if event.kind is EventKind.CELL_COMPLETED:
        return STATUS_COMPLETE
    return None


class TutorApp(tk.Tk):
    """
    Main window of the Tactile Braille Tutor.

    All session calls happen on the Tk main thread, which makes it the single
    owner of engine state. File imports run on a worker thread and hand their
    result over through :meth:`TactileSession.submit_text`.

    Args:
        config: Loaded :class:`TactileConfig`.
        session: The session to drive.
        router: Output router already observing *session*.
    """

    def __init__(
        self,
        config: TactileConfig,
        session: TactileSession,
        router: OutputRouter,
    ) -> None:
        """Build and configure the application window."""
        super().__init__()

        self._cfg = config
        self._session = session
        self._router = router
        self._geometry = session.validator.geometry
        self._colours = PALETTES[config.ui.theme]
        self._squares: dict[int, int] = {}
        self._fills: dict[int, int] = {}

        self._font_label = tkfont.Font(
            family=config.ui.font_family, size=config.ui.label_font_size, weight="bold",
        )
        self._font_braille = tkfont.Font(size=config.ui.braille_font_size)
        self._font_status = tkfont.Font(family=config.ui.font_family, size=12)

        self._input_var = tk.StringVar(value="Input: ")
        self._cell_var = tk.StringVar(value="Cell: —")
        self._transcript_var = tk.StringVar(value="")
        self._status_var = tk.StringVar(value="Type a sentence or open a text file")
        self._entry_var = tk.StringVar(value="")

        self._build_window()
        self._build_layout()

        router.add_listener(self._on_session_event)

        self.bind("<Left>", lambda e: self._navigate(e, -1))
        self.bind("<Right>", lambda e: self._navigate(e, +1))
        self.protocol("WM_DELETE_WINDOW", self._on_close)

        self._render_cell(session.current())
        self.after(_FEED_POLL_MS, self._poll_feed)

    # ──────────────────────────────────────────
    # Window & layout construction
    # ──────────────────────────────────────────

    def _build_window(self) -> None:
        """Configure root window properties."""
        self.title("Tactile Braille Tutor")
        self.configure(bg=self._colours["bg_main"])
        self.resizable(False, False)

    def _build_layout(self) -> None:
        """Construct all child widgets."""
        top = tk.Frame(self, bg=self._colours["bg_main"])
        top.pack(fill=tk.X, padx=16, pady=(12, 4))

        entry = tk.Entry(top, textvariable=self._entry_var, font=self._font_status, width=36)
        entry.pack(side=tk.LEFT, fill=tk.X, expand=True)
        entry.bind("<Return>", lambda _: self._transcribe_entry())

        tk.Button(top, text="Transcribe", command=self._transcribe_entry).pack(side=tk.LEFT, padx=6)
        tk.Button(top, text="Open…", command=self._open_file).pack(side=tk.LEFT)

        for var, fnt, colour in (
            (self._input_var, self._font_status, self._colours["text_secondary"]),
            (self._transcript_var, self._font_braille, self._colours["text_primary"]),
            (self._cell_var, self._font_label, self._colours["text_primary"]),
        ):
            tk.Label(
                self, textvariable=var, font=fnt, bg=self._colours["bg_main"], fg=colour,
                wraplength=520, justify=tk.CENTER,
            ).pack(pady=2)

        size = (
            self._geometry.width + 2 * _CANVAS_MARGIN,
            self._geometry.height + 2 * _CANVAS_MARGIN,
        )
        self._canvas = tk.Canvas(
            self, width=size[0], height=size[1], bg=self._colours["bg_main"], highlightthickness=0,
        )
        self._canvas.pack(pady=8)
        self._build_grid()

        self._canvas.bind("<ButtonPress-1>", self._on_pointer)
        self._canvas.bind("<B1-Motion>", self._on_pointer)
        self._canvas.bind("<ButtonRelease-1>", self._on_release)

        nav = tk.Frame(self, bg=self._colours["bg_main"])
        nav.pack(fill=tk.X, padx=16, pady=6)
        tk.Button(nav, text="◀ Previous", command=self._session.previous).pack(side=tk.LEFT)
        tk.Button(nav, text="Next ▶", command=self._session.next).pack(side=tk.RIGHT)

        tk.Label(
            self, textvariable=self._status_var, font=self._font_status,
            bg=self._colours["bg_main"], fg=self._colours["text_secondary"], anchor="w",
        ).pack(fill=tk.X, padx=16, pady=(0, 8))

    def _build_grid(self) -> None:
        """Draw the six dot squares and their (initially hidden) fills."""
        count = self._geometry.rows * self._geometry.cols
        for dot in range(1, count + 1):
            x, y = self._geometry.origin_of(dot)
            x0, y0 = x + _CANVAS_MARGIN, y + _CANVAS_MARGIN
            x1, y1 = x0 + self._geometry.cell_size, y0 + self._geometry.cell_size
            self._squares[dot] = self._canvas.create_rectangle(
                x0, y0, x1, y1, fill=self._colours["bg_square"], outline="",
            )
            self._fills[dot] = self._canvas.create_oval(
                x0 + _DOT_INSET, y0 + _DOT_INSET, x1 - _DOT_INSET, y1 - _DOT_INSET,
                fill=self._colours["fg_raised"], outline="", state=tk.HIDDEN,
            )

    # ──────────────────────────────────────────
    # Rendering
    # ──────────────────────────────────────────

    def _render_cell(self, cell: Cell) -> None:
        """Show the raised dots and label of *cell*."""
        for dot, item in self._fills.items():
            raised = dot in cell.pattern
            self._canvas.itemconfigure(
                item, state=tk.NORMAL if raised else tk.HIDDEN, fill=self._colours["fg_raised"],
            )
        self._cell_var.set(
            f"Cell: {cell.token.label}   ({self._session.navigator.progress})"
        )
        self._render_transcript()

    def _render_transcript(self) -> None:
        """Show the whole sequence in Unicode Braille, marking the cursor."""
        sequence = self._session.sequence
        cursor = self._session.cursor
        chars = [
            f"[{to_unicode(resolve(t))}]" if i == cursor else to_unicode(resolve(t))
            for i, t in enumerate(sequence)
        ]
        self._transcript_var.set("".join(chars))

    def _mark_confirmed(self, dot: int) -> None:
        """Colour a confirmed dot."""
        item = self._fills.get(dot)
        if item is not None:
            self._canvas.itemconfigure(item, fill=self._colours["fg_confirmed"])

    def _clear_confirmed(self) -> None:
        """Reset every fill to the raised colour."""
        for item in self._fills.values():
            self._canvas.itemconfigure(item, fill=self._colours["fg_raised"])

    # ──────────────────────────────────────────
    # Event handlers
    # ──────────────────────────────────────────

    def _on_session_event(self, event: SessionEvent) -> None:
        """Update widgets for a session event (always on the Tk thread)."""
        if event.kind is EventKind.CELL_CHANGED:
            self._render_cell(event.payload)  # type: ignore[arg-type]
        elif event.kind is EventKind.SEQUENCE_INSTALLED:
            self._input_var.set(f"Input: {self._session.source_text.strip()}")
        elif event.kind is EventKind.DOT_CONFIRMED:
            self._mark_confirmed(event.payload.dot)  # type: ignore[union-attr]
        elif event.kind is EventKind.GESTURE_ENDED:
            self._clear_confirmed()

        status = status_for(event)
        if status is not None:
            self._status_var.set(status)

    def _on_pointer(self, event: tk.Event) -> None:  # type: ignore[type-arg]
        """Forward a press or drag sample in grid-local coordinates."""
        self._session.on_move(event.x - _CANVAS_MARGIN, event.y - _CANVAS_MARGIN)

    def _on_release(self, _event: tk.Event) -> None:  # type: ignore[type-arg]
        """End the current exploration gesture."""
        self._session.on_gesture_end()

    def _navigate(self, event: tk.Event, step: int) -> None:  # type: ignore[type-arg]
        """Arrow-key navigation, ignored while typing in the entry."""
        if isinstance(event.widget, tk.Entry):
            return
        if step < 0:
            self._session.previous()
        else:
            self._session.next()

    def _transcribe_entry(self) -> None:
        """Install the typed sentence."""
        text = self._entry_var.get()
        if not text.strip():
            self._status_var.set("Nothing to transcribe")
            return
        self._session.load_text(text, origin="keyboard")
        self.focus_set()

    def _open_file(self) -> None:
        """Pick a text file and import it on a worker thread."""
        path = filedialog.askopenfilename(
            title="Open text file",
            filetypes=[("Text files", "*.txt"), ("All files", "*.*")],
        )
        if not path:
            return
        self._status_var.set("Importing…")

        def _import() -> None:
            try:
                text = read_text_file(
                    path,
                    encoding=self._cfg.importer.encoding,
                    max_chars=self._cfg.importer.max_chars,
                )
            except TextImportError as exc:
                logger.warning("Import failed: %s", exc)
                self.after(0, lambda r=exc.reason: self._status_var.set(f"Import failed: {r}"))
                return
            self._session.submit_text(text, origin=f"file:{path}")

        threading.Thread(target=_import, daemon=True, name="text-import").start()

    def _poll_feed(self) -> None:
        """Install text handed over by background producers."""
        self._session.pump()
        self.after(_FEED_POLL_MS, self._poll_feed)

    def _on_close(self) -> None:
        """Handle window close — stop output workers."""
        logger.info("Window closing — stopping outputs")
        self._router.shutdown()
        self.destroy()
