"""Tkinter desktop GUI for the FocusRead RSVP reader.

WHY: Speed reading works best in a calm, fixed window: one large word with
its pivot letter on a centre guide, play/pause and speed within reach,
and the source text editable below. The desktop app offers that without
a browser or a terminal.

HOW: A single ReaderApp class builds the window around a ReaderController
whose clock runs on a TkScheduler, so every word change happens on the Tk
main loop. Document extraction and AI actions are slow, so they run in a
background thread; results flow back through a thread-safe queue polled
with .after(), and the main thread finishes the controller task.

RULES:
- Python 3.9 compatible — no match/case, no X | Y unions at runtime
- tkinter widgets are ONLY touched from the main thread
- The worker queue is the ONLY channel from worker threads to the UI
- Every worker posts exactly one message, whatever it raises
- Only the main thread calls controller methods
- Space toggles play/pause, Escape resets
- Closing the window cancels all pending timers before destroying it
"""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
import tkinter as tk
from pathlib import Path
from tkinter import filedialog, ttk
from typing import Any, Dict, Optional

from focusread.ai.client import TransformError
from focusread.ai.transformers import TRANSFORMERS
from focusread.config import DEFAULT_SPEED, DEFAULT_TEXT, SPEED_CHOICES
from focusread.controller import ReaderBusyError, ReaderController
from focusread.core.scheduler import TkScheduler
from focusread.core.session import SessionSnapshot
from focusread.sources.documents import DocumentExtractionError, load_document

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WINDOW_TITLE = "FocusRead RSVP"
_WINDOW_MIN_WIDTH = 760
_WINDOW_MIN_HEIGHT = 560
_PAD = 8

_BG = "#0a0f1d"
_FG = "#f1f5f9"
_FG_PAUSED = "#94a3b8"
_PIVOT_FG = "#f43f5e"
_WORD_FONT = ("Courier", 48, "bold")
_PLACEHOLDER = "Select text or upload a book to begin..."

_POLL_INTERVAL_MS = 100

# Worker message types
_DONE_MSG = "done"
_ERROR_MSG = "error"


class ReaderApp:
    """Main tkinter application.

    RULES:
    - self._controller is created once and lives as long as the window
    - Worker threads post (_DONE_MSG, (source, text)) or (_ERROR_MSG, message)
    - Buttons that start a task are disabled while the controller is busy
    """

    def __init__(self, root: tk.Tk) -> None:
        self._root = root
        self._root.title(_WINDOW_TITLE)
        self._root.minsize(_WINDOW_MIN_WIDTH, _WINDOW_MIN_HEIGHT)

        self._worker_queue: queue.Queue = queue.Queue()
        self._worker_thread: Optional[threading.Thread] = None

        self._controller = ReaderController(
            TkScheduler(root), text=DEFAULT_TEXT, speed=DEFAULT_SPEED
        )

        self._build_ui()
        self._controller.subscribe(self._render)
        self._controller.subscribe_status(self._show_status)
        self._render(self._controller.session.snapshot())

        self._root.bind("<space>", self._on_space)
        self._root.bind("<Escape>", lambda _e: self._controller.reset())
        self._root.protocol("WM_DELETE_WINDOW", self._on_close)

    # ------------------------------------------------------------------
    # UI Construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        main = ttk.Frame(self._root, padding=_PAD)
        main.pack(fill=tk.BOTH, expand=True)

        # --- Header: document and AI actions ---
        header = ttk.Frame(main)
        header.pack(fill=tk.X, pady=(0, _PAD))
        ttk.Label(header, text=_WINDOW_TITLE, font=("Helvetica", 16, "bold")).pack(side=tk.LEFT)

        self._task_buttons: Dict[str, ttk.Button] = {}
        for key in sorted(TRANSFORMERS, reverse=True):
            btn = ttk.Button(
                header,
                text=TRANSFORMERS[key]().name,
                command=lambda k=key: self._start_transform(k),
            )
            btn.pack(side=tk.RIGHT, padx=(4, 0))
            self._task_buttons[key] = btn
        load_btn = ttk.Button(header, text="Load Document...", command=self._browse_document)
        load_btn.pack(side=tk.RIGHT, padx=(4, 0))
        self._task_buttons["load"] = load_btn

        # --- Reader display ---
        display = tk.Frame(main, bg=_BG, height=200)
        display.pack(fill=tk.X, pady=(0, _PAD))
        display.pack_propagate(False)
        display.columnconfigure(0, weight=1, uniform="side")
        display.columnconfigure(2, weight=1, uniform="side")
        display.rowconfigure(0, weight=1)

        self._prefix_label = tk.Label(display, bg=_BG, fg=_FG, font=_WORD_FONT, anchor=tk.E)
        self._prefix_label.grid(row=0, column=0, sticky="nsew")
        self._pivot_label = tk.Label(display, bg=_BG, fg=_PIVOT_FG, font=_WORD_FONT, width=1)
        self._pivot_label.grid(row=0, column=1, sticky="ns")
        self._suffix_label = tk.Label(display, bg=_BG, fg=_FG, font=_WORD_FONT, anchor=tk.W)
        self._suffix_label.grid(row=0, column=2, sticky="nsew")
        self._placeholder_label = tk.Label(
            display, bg=_BG, fg=_FG_PAUSED, text=_PLACEHOLDER, font=("Helvetica", 12, "italic")
        )

        # --- Controls ---
        controls = ttk.Frame(main)
        controls.pack(fill=tk.X, pady=(0, _PAD))

        self._progress = ttk.Progressbar(controls, maximum=100.0, mode="determinate")
        self._progress.pack(fill=tk.X, pady=(0, 4))

        row = ttk.Frame(controls)
        row.pack(fill=tk.X)
        self._play_btn = ttk.Button(row, text="Play", width=8, command=self._controller.toggle_play)
        self._play_btn.pack(side=tk.LEFT)
        ttk.Button(row, text="Reset", command=self._controller.reset).pack(side=tk.LEFT, padx=(4, 0))

        self._speed_var = tk.IntVar(value=DEFAULT_SPEED)
        for speed in reversed(SPEED_CHOICES):
            ttk.Radiobutton(
                row,
                text="{} WPM".format(speed),
                value=speed,
                variable=self._speed_var,
                command=lambda: self._controller.set_speed(self._speed_var.get()),
            ).pack(side=tk.RIGHT, padx=(4, 0))

        # --- Status ---
        self._status_label = ttk.Label(main, text="", foreground=_PIVOT_FG)
        self._status_label.pack(fill=tk.X, pady=(0, _PAD))

        # --- Reading queue (source text) ---
        queue_frame = ttk.LabelFrame(main, text="Reading Queue", padding=_PAD)
        queue_frame.pack(fill=tk.BOTH, expand=True)

        queue_header = ttk.Frame(queue_frame)
        queue_header.pack(fill=tk.X, pady=(0, 4))
        self._counter_label = ttk.Label(queue_header, text="")
        self._counter_label.pack(side=tk.RIGHT)
        ttk.Button(queue_header, text="Use this text", command=self._apply_text).pack(side=tk.LEFT)

        self._text_box = tk.Text(queue_frame, height=8, wrap=tk.WORD)
        self._text_box.pack(fill=tk.BOTH, expand=True)
        self._text_box.insert("1.0", self._controller.source_text)

    # ------------------------------------------------------------------
    # Rendering (session listener, main thread)
    # ------------------------------------------------------------------

    def _render(self, snapshot: SessionSnapshot) -> None:
        word = snapshot.word
        if word is None:
            for label in (self._prefix_label, self._pivot_label, self._suffix_label):
                label.config(text="")
            self._placeholder_label.place(relx=0.5, rely=0.5, anchor=tk.CENTER)
        else:
            self._placeholder_label.place_forget()
            fg = _FG if snapshot.is_playing else _FG_PAUSED
            self._prefix_label.config(text=word.prefix, fg=fg)
            self._pivot_label.config(text=word.pivot)
            self._suffix_label.config(text=word.suffix, fg=fg)

        self._progress["value"] = snapshot.progress
        self._play_btn.config(text="Pause" if snapshot.is_playing else "Play")
        self._counter_label.config(text=self._controller.word_counter())

        if snapshot.words_changed:
            current = self._text_box.get("1.0", "end-1c")
            if current != self._controller.source_text:
                self._text_box.delete("1.0", tk.END)
                self._text_box.insert("1.0", self._controller.source_text)

    def _show_status(self, message: Optional[str]) -> None:
        self._status_label.config(text=message or "")
        busy = self._controller.is_processing
        for btn in self._task_buttons.values():
            btn.state(["disabled"] if busy else ["!disabled"])

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def _on_space(self, event: Any) -> Optional[str]:
        # Typing in the text box must not toggle playback
        if event.widget is self._text_box:
            return None
        self._controller.toggle_play()
        return "break"

    def _apply_text(self) -> None:
        self._controller.load_text(self._text_box.get("1.0", "end-1c"))

    def _browse_document(self) -> None:
        path = filedialog.askopenfilename(
            title="Select a document",
            filetypes=[("PDF files", "*.pdf"), ("Text files", "*.txt"), ("All files", "*.*")],
        )
        if not path:
            return
        self._start_task(
            "Extracting text from {}...".format(Path(path).name),
            self._extract_worker,
            Path(path),
        )

    def _start_transform(self, key: str) -> None:
        source = self._controller.source_text
        if not source.strip():
            return
        transformer = TRANSFORMERS[key]()
        self._start_task(transformer.status_message, self._transform_worker, key, source)

    def _start_task(self, message: str, target: Any, *args: Any) -> None:
        try:
            self._controller.begin_task(message)
        except ReaderBusyError:
            return
        self._worker_thread = threading.Thread(target=target, args=args, daemon=True)
        self._worker_thread.start()
        self._root.after(_POLL_INTERVAL_MS, self._poll_worker)

    def _on_close(self) -> None:
        self._controller.close()
        self._root.destroy()

    # ------------------------------------------------------------------
    # Background workers (NEVER touch widgets or the controller here)
    # ------------------------------------------------------------------

    def _extract_worker(self, path: Path) -> None:
        try:
            text = load_document(path)
        except DocumentExtractionError as exc:
            self._worker_queue.put((_ERROR_MSG, str(exc)))
            return
        except Exception:
            logger.exception("Unexpected error loading %s", path)
            self._worker_queue.put((_ERROR_MSG, "Error reading document."))
            return
        self._worker_queue.put((_DONE_MSG, (None, text)))

    def _transform_worker(self, key: str, source: str) -> None:
        transformer = TRANSFORMERS[key]()
        try:
            text = asyncio.run(transformer.transform(source))
        except TransformError as exc:
            logger.warning("%s failed: %s", transformer.name, exc)
            self._worker_queue.put((_ERROR_MSG, "{} failed: {}".format(transformer.name, exc)))
            return
        except Exception:
            logger.exception("%s failed unexpectedly", transformer.name)
            self._worker_queue.put((_ERROR_MSG, "{} failed unexpectedly.".format(transformer.name)))
            return
        self._worker_queue.put((_DONE_MSG, (source, text)))

    def _poll_worker(self) -> None:
        try:
            msg_type, msg_data = self._worker_queue.get_nowait()
        except queue.Empty:
            self._root.after(_POLL_INTERVAL_MS, self._poll_worker)
            return

        if msg_type == _DONE_MSG:
            source, text = msg_data
            self._controller.complete_task(text, source=source)
        elif msg_type == _ERROR_MSG:
            self._controller.fail_task(str(msg_data))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the Tkinter GUI application.

    RULES:
    - Blocks until the window is closed
    - Must be called from the main thread
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    root = tk.Tk()
    ReaderApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
