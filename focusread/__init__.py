"""FocusRead — RSVP speed reader with pivot-aligned word display.

WHY: Reading one word at a time at a fixed screen position removes the
eye movements between words. Aligning every word on its Optimal
Recognition Point (ORP) keeps the eye fixed on a single column, so
throughput can rise without losing comprehension.

HOW: Three-stage core — segment (text into pivot-aligned word records),
session (cursor, play/pause, speed), clock (punctuation-aware delays that
advance the session). Text sources (manual entry, PDF extraction, AI
refinement) all feed the same segmenter.

RULES:
- The core (focusread.core) performs no I/O
- Every text source re-enters through ReadingSession.load_text()
- Surfaces (CLI, GUI, HTTP API) never mutate session fields directly
"""

__version__ = "0.1.0"
