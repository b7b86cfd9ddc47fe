"""Tests for the desktop app's background workers and result polling.

WHY: Workers run in daemon threads. If one dies without posting to the
queue, the controller stays busy and the Load/Refine/Summarize buttons
stay disabled until restart. Every worker must post exactly one message.

HOW: The worker and poll methods only touch ``_worker_queue``,
``_controller`` and ``_root.after``, so they are called unbound on a
SimpleNamespace stand-in. No window is created, so no display is needed.

RULES:
- Skipped when tkinter is not installed
"""

from __future__ import annotations

import queue
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

pytest.importorskip("tkinter")

from focusread.ai.client import TransformError  # noqa: E402
from focusread.ai.transformers import TextTransformer  # noqa: E402
from focusread.controller import ReaderController  # noqa: E402
from focusread.gui import _DONE_MSG, _ERROR_MSG, ReaderApp  # noqa: E402


class _Crashes(TextTransformer):
    @property
    def name(self):
        return "Refine"

    async def transform(self, text):
        raise KeyError("candidates")


class _Fails(TextTransformer):
    @property
    def name(self):
        return "Refine"

    async def transform(self, text):
        raise TransformError("Could not reach the AI service.")


class _Upper(TextTransformer):
    @property
    def name(self):
        return "Refine"

    async def transform(self, text):
        return text.upper()


def _stub(controller=None):
    return SimpleNamespace(
        _worker_queue=queue.Queue(),
        _controller=controller,
        _root=MagicMock(),
        _poll_worker=MagicMock(),
    )


# ---------------------------------------------------------------------------
# TestWorkers
# ---------------------------------------------------------------------------


class TestWorkers:

    def test_extract_posts_text(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("some  text", encoding="utf-8")
        app = _stub()
        ReaderApp._extract_worker(app, path)
        assert app._worker_queue.get_nowait() == (_DONE_MSG, (None, "some text"))

    def test_extract_posts_known_error(self, tmp_path):
        app = _stub()
        ReaderApp._extract_worker(app, tmp_path / "missing.txt")
        msg_type, message = app._worker_queue.get_nowait()
        assert msg_type == _ERROR_MSG
        assert "File not found" in message

    def test_extract_posts_unexpected_error(self, tmp_path):
        app = _stub()
        with patch("focusread.gui.load_document", side_effect=TypeError("bad font")):
            ReaderApp._extract_worker(app, tmp_path / "odd.pdf")
        assert app._worker_queue.get_nowait() == (_ERROR_MSG, "Error reading document.")

    def test_transform_posts_result_with_source(self):
        app = _stub()
        with patch.dict("focusread.gui.TRANSFORMERS", {"refine": _Upper}):
            ReaderApp._transform_worker(app, "refine", "quiet")
        assert app._worker_queue.get_nowait() == (_DONE_MSG, ("quiet", "QUIET"))

    def test_transform_posts_known_error(self):
        app = _stub()
        with patch.dict("focusread.gui.TRANSFORMERS", {"refine": _Fails}):
            ReaderApp._transform_worker(app, "refine", "text")
        assert app._worker_queue.get_nowait() == (
            _ERROR_MSG, "Refine failed: Could not reach the AI service."
        )

    def test_transform_posts_unexpected_error(self):
        app = _stub()
        with patch.dict("focusread.gui.TRANSFORMERS", {"refine": _Crashes}):
            ReaderApp._transform_worker(app, "refine", "text")
        assert app._worker_queue.get_nowait() == (_ERROR_MSG, "Refine failed unexpectedly.")


# ---------------------------------------------------------------------------
# TestPollWorker
# ---------------------------------------------------------------------------


class TestPollWorker:

    def test_error_frees_the_controller(self, scheduler):
        controller = ReaderController(scheduler, text="keep me")
        controller.begin_task("Refining text with AI...")
        app = _stub(controller)
        app._worker_queue.put((_ERROR_MSG, "Refine failed unexpectedly."))

        ReaderApp._poll_worker(app)

        assert not controller.is_processing
        assert controller.status_message == "Refine failed unexpectedly."
        assert controller.source_text == "keep me"

    def test_stale_result_is_discarded(self, scheduler):
        controller = ReaderController(scheduler, text="original")
        controller.begin_task("Refining text with AI...")
        controller.load_text("edited")
        app = _stub(controller)
        app._worker_queue.put((_DONE_MSG, ("original", "ORIGINAL")))

        ReaderApp._poll_worker(app)

        assert controller.source_text == "edited"
        assert not controller.is_processing
        assert "discarded" in controller.status_message

    def test_keeps_polling_while_queue_is_empty(self, scheduler):
        app = _stub(ReaderController(scheduler))
        ReaderApp._poll_worker(app)
        app._root.after.assert_called_once()
