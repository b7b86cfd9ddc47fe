"""Command-line interface for the FocusRead RSVP reader.

WHY: A terminal is enough to speed-read a PDF or a pasted paragraph, and
a dry-run timing plan is handy for checking how long a text will take at
each speed. The CLI wires the document loader, the optional AI actions
and the reading core behind two subcommands.

HOW: argparse with two subcommands:
  read — load text (file, --text, stdin, or the built-in sample), apply
         an optional --refine / --summarize, then play it word by word
         on an asyncio event loop. The pivot character is highlighted and
         always printed in the same terminal column.
  plan — print every word with its on-screen delay and the total time.
Status messages go to stderr; the word display goes to stdout.

RULES:
- --speed accepts only the fixed WPM choices (argparse rejects others)
- AI failures keep the original text and print the status message
- Document failures exit with status 1
- Ctrl+C stops playback and exits with status 130
- Python 3.9 compatible — no match/case, no X | Y unions at runtime
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from focusread.ai.transformers import TRANSFORMERS
from focusread.config import DEFAULT_SPEED, DEFAULT_TEXT, SPEED_CHOICES
from focusread.controller import ReaderController
from focusread.core.clock import compute_delay_ms
from focusread.core.scheduler import AsyncioScheduler
from focusread.core.session import SessionSnapshot, SessionState
from focusread.core.words import WordRecord, segment
from focusread.sources.documents import DocumentExtractionError, load_document

_PIVOT_COLOR = "\033[1;31m"
_RESET_COLOR = "\033[0m"
_CLEAR_LINE = "\r\033[K"
_DISPLAY_WIDTH = 41


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not mix with the word display on stdout.
    """
    print(msg, file=sys.stderr, flush=True)


def render_word(word: Optional[WordRecord], width: int = _DISPLAY_WIDTH, color: bool = True) -> str:
    """Lay out a word so its pivot lands in the centre column of ``width``.

    RULES:
    - The pivot is always at column width // 2 (0-based)
    - Prefixes longer than the left half are cut from the left
    - None renders as a blank line of ``width`` spaces
    """
    center = width // 2
    if word is None:
        return " " * width
    prefix = word.prefix[-center:] if center else ""
    pivot = word.pivot
    if color:
        pivot = "{}{}{}".format(_PIVOT_COLOR, pivot, _RESET_COLOR)
    return "{}{}{}{}".format(" " * (center - len(prefix)), prefix, pivot, word.suffix)


def _read_input(args: argparse.Namespace) -> str:
    """Resolve the text to read from --text, a file, stdin, or the sample."""
    if args.text is not None:
        return args.text
    if args.input_file == "-":
        return sys.stdin.read()
    if args.input_file:
        path = Path(args.input_file).resolve()
        _status("Extracting text from {}...".format(path.name))
        return load_document(path)
    return DEFAULT_TEXT


def _print_snapshot(snapshot: SessionSnapshot, color: bool) -> None:
    line = "[{:3.0f}%] {}".format(snapshot.progress, render_word(snapshot.word, color=color))
    sys.stdout.write(_CLEAR_LINE + line)
    sys.stdout.flush()


async def _play(text: str, speed: int, transform_key: Optional[str], color: bool) -> SessionState:
    """Load ``text`` into a controller and play it to the end."""
    controller = ReaderController(AsyncioScheduler(), text=text, speed=speed)
    finished = asyncio.Event()

    def on_status(message: Optional[str]) -> None:
        if message:
            _status(message)

    def on_change(snapshot: SessionSnapshot) -> None:
        _print_snapshot(snapshot, color)
        if not snapshot.is_playing:
            finished.set()

    controller.subscribe_status(on_status)
    try:
        if transform_key:
            transformer = TRANSFORMERS[transform_key]()
            if not await controller.apply_transform(transformer):
                _status("Continuing with the original text.")

        if not controller.session.words:
            _status("Nothing to read.")
            return controller.session.state

        _status("Reading {} words at {} WPM. Press Ctrl+C to stop.".format(
            len(controller.session.words), speed
        ))
        controller.subscribe(on_change)
        controller.toggle_play()
        await finished.wait()
        return controller.session.state
    finally:
        controller.close()
        sys.stdout.write("\n")
        sys.stdout.flush()


def _run_read(args: argparse.Namespace) -> int:
    try:
        text = _read_input(args)
    except DocumentExtractionError as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    transform_key = None
    if args.refine:
        transform_key = "refine"
    elif args.summarize:
        transform_key = "summarize"

    try:
        state = asyncio.run(_play(text, args.speed, transform_key, not args.no_color))
    except KeyboardInterrupt:
        _status("\nStopped by user.")
        return 130

    if state == SessionState.FINISHED:
        _status("Done.")
    return 0


def format_plan(text: str, speed: int) -> List[str]:
    """Timing plan lines: one per word, then a total.

    RULES:
    - Each word line: 1-based index, delay in ms (1 decimal), word text
    - Final line: word count and total time in seconds
    """
    words = segment(text)
    lines: List[str] = []
    total_ms = 0.0
    for i, word in enumerate(words, start=1):
        delay = compute_delay_ms(word.text, speed)
        total_ms += delay
        lines.append("{:>5}  {:>7.1f} ms  {}".format(i, delay, word.text))
    lines.append("{} words, {:.1f} s at {} WPM".format(len(words), total_ms / 1000, speed))
    return lines


def _run_plan(args: argparse.Namespace) -> int:
    try:
        text = _read_input(args)
    except DocumentExtractionError as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1
    for line in format_plan(text, args.speed):
        print(line)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Subcommands: read, plan (one is required)
    - Both accept: optional input_file ("-" for stdin), --text, --speed
    - read adds: --refine / --summarize (mutually exclusive), --no-color
    - Global: --verbose enables debug logging on stderr
    """
    parser = argparse.ArgumentParser(
        prog="focusread",
        description="Speed-read text, PDFs or AI-condensed text one word at a time (RSVP).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug information to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_source_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "input_file",
            nargs="?",
            default=None,
            help="PDF or .txt file to read, or '-' for stdin. Defaults to a sample text.",
        )
        sub.add_argument(
            "--text",
            default=None,
            help="Read this text instead of a file.",
        )
        sub.add_argument(
            "--speed",
            type=int,
            choices=SPEED_CHOICES,
            default=DEFAULT_SPEED,
            help="Reading speed in words per minute (default: %(default)s).",
        )

    read = subparsers.add_parser("read", help="Play text word by word in the terminal.")
    add_source_args(read)
    ai_group = read.add_mutually_exclusive_group()
    ai_group.add_argument(
        "--refine",
        action="store_true",
        help="Rewrite the text for speed reading with AI before playing.",
    )
    ai_group.add_argument(
        "--summarize",
        action="store_true",
        help="Condense the text with AI before playing.",
    )
    read.add_argument(
        "--no-color",
        action="store_true",
        help="Do not highlight the pivot character.",
    )
    read.set_defaults(handler=_run_read)

    plan = subparsers.add_parser("plan", help="Print per-word delays and total reading time.")
    add_source_args(plan)
    plan.set_defaults(handler=_run_plan)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    sys.exit(args.handler(args))


if __name__ == "__main__":
    main()
