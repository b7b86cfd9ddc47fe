"""Unit tests for the ReadingSession state machine.

WHY: The session's invariants (cursor bounds, reset-on-load, stop at the
end, closed speed set) are what keep the reader from showing a wrong
word or playing forever. Each transition is checked from several prior
states because bugs hide in the combinations.

HOW: Tests are grouped by transition:
  - TestInitialState: construction defaults
  - TestLoadText: wholesale replacement and resets
  - TestTogglePlay / TestReset / TestSetSpeed
  - TestAdvance: stepping and the end-of-text boundary
  - TestProgress: the display progress value
  - TestSubscriptions: snapshot publishing

RULES:
- Sessions are driven only through public transitions
- The out-of-range cursor is asserted unreachable, never "recovered"
"""

from __future__ import annotations

import pytest

from focusread.core.session import (
    InvalidSpeedError,
    ReadingSession,
    SessionState,
    Speed,
    compute_progress,
)


def _assert_cursor_in_bounds(session: ReadingSession) -> None:
    assert 0 <= session.current_index < max(1, len(session.words))


# ---------------------------------------------------------------------------
# TestInitialState
# ---------------------------------------------------------------------------


class TestInitialState:

    def test_empty_session_is_idle(self):
        session = ReadingSession()
        assert session.state == SessionState.IDLE
        assert session.current_word is None
        assert session.current_index == 0
        assert not session.is_playing

    def test_loaded_session_is_paused_at_first_word(self, sample_session):
        assert sample_session.state == SessionState.PAUSED
        assert sample_session.current_word.text == "Hi."

    def test_default_speed_is_300(self):
        assert ReadingSession("a b").speed == Speed.WPM_300

    def test_invalid_initial_speed_rejected(self):
        with pytest.raises(InvalidSpeedError):
            ReadingSession("a b", speed=450)


# ---------------------------------------------------------------------------
# TestLoadText
# ---------------------------------------------------------------------------


class TestLoadText:

    def test_replaces_words(self, sample_session):
        sample_session.load_text("completely new words")
        assert [w.text for w in sample_session.words] == ["completely", "new", "words"]

    def test_resets_cursor_and_stops_playback(self, sample_session):
        sample_session.toggle_play()
        sample_session.advance()
        sample_session.advance()
        assert sample_session.current_index == 2

        sample_session.load_text("fresh text here")
        assert sample_session.current_index == 0
        assert not sample_session.is_playing
        assert sample_session.state == SessionState.PAUSED

    def test_load_after_finish_clears_finished(self, sample_session):
        sample_session.toggle_play()
        for _ in range(5):
            sample_session.advance()
        assert sample_session.state == SessionState.FINISHED

        sample_session.load_text("again")
        assert sample_session.state == SessionState.PAUSED

    def test_blank_text_goes_idle(self, sample_session):
        sample_session.load_text("   ")
        assert sample_session.words == ()
        assert sample_session.state == SessionState.IDLE
        assert sample_session.current_word is None

    def test_words_tuple_is_replaced_not_patched(self, sample_session):
        before = sample_session.words
        sample_session.load_text("Hi. There, world")
        assert sample_session.words is not before
        assert sample_session.words == before


# ---------------------------------------------------------------------------
# TestTogglePlay
# ---------------------------------------------------------------------------


class TestTogglePlay:

    def test_toggle_starts_and_pauses(self, sample_session):
        sample_session.toggle_play()
        assert sample_session.is_playing
        assert sample_session.state == SessionState.PLAYING
        sample_session.toggle_play()
        assert not sample_session.is_playing
        assert sample_session.state == SessionState.PAUSED

    def test_toggle_ignored_without_words(self, recorder):
        session = ReadingSession()
        session.subscribe(recorder)
        session.toggle_play()
        assert not session.is_playing
        assert recorder.snapshots == []

    def test_toggle_on_at_last_index_is_allowed(self, sample_session):
        sample_session.advance()
        sample_session.advance()
        sample_session.toggle_play()
        assert sample_session.is_playing
        assert sample_session.current_index == 2


# ---------------------------------------------------------------------------
# TestReset
# ---------------------------------------------------------------------------


class TestReset:

    def test_reset_rewinds_and_stops(self, sample_session):
        sample_session.toggle_play()
        sample_session.advance()
        sample_session.reset()
        assert sample_session.current_index == 0
        assert not sample_session.is_playing

    def test_reset_on_empty_session(self):
        session = ReadingSession()
        session.reset()
        assert session.state == SessionState.IDLE


# ---------------------------------------------------------------------------
# TestSetSpeed
# ---------------------------------------------------------------------------


class TestSetSpeed:

    @pytest.mark.parametrize("value", [300, 500, 700, 900])
    def test_accepts_each_choice(self, sample_session, value):
        sample_session.set_speed(value)
        assert sample_session.speed == value
        assert isinstance(sample_session.speed, Speed)

    @pytest.mark.parametrize("value", [0, 299, 301, 1000, -300, True])
    def test_rejects_other_values(self, sample_session, value):
        with pytest.raises(InvalidSpeedError):
            sample_session.set_speed(value)
        assert sample_session.speed == 900

    def test_invalid_speed_is_a_value_error(self, sample_session):
        with pytest.raises(ValueError):
            sample_session.set_speed(123)

    def test_does_not_touch_cursor_or_playback(self, sample_session):
        sample_session.toggle_play()
        sample_session.advance()
        sample_session.set_speed(300)
        assert sample_session.is_playing
        assert sample_session.current_index == 1


# ---------------------------------------------------------------------------
# TestAdvance
# ---------------------------------------------------------------------------


class TestAdvance:

    def test_moves_forward_one_word(self, sample_session):
        sample_session.toggle_play()
        sample_session.advance()
        assert sample_session.current_word.text == "There,"

    def test_stops_at_last_word(self, sample_session):
        sample_session.toggle_play()
        sample_session.advance()
        sample_session.advance()
        assert sample_session.is_playing
        sample_session.advance()
        assert not sample_session.is_playing
        assert sample_session.current_index == 2
        assert sample_session.state == SessionState.FINISHED

    def test_idempotent_at_boundary(self, sample_session):
        sample_session.toggle_play()
        for _ in range(10):
            sample_session.advance()
            _assert_cursor_in_bounds(sample_session)
        assert sample_session.current_index == 2
        assert not sample_session.is_playing
        assert sample_session.state == SessionState.FINISHED

    def test_boundary_while_paused_is_not_finished(self, sample_session):
        sample_session.advance()
        sample_session.advance()
        sample_session.advance()
        assert sample_session.current_index == 2
        assert sample_session.state == SessionState.PAUSED

    def test_single_word_text(self):
        session = ReadingSession("alone")
        session.toggle_play()
        session.advance()
        assert session.current_index == 0
        assert not session.is_playing

    def test_noop_without_words(self):
        session = ReadingSession()
        session.advance()
        _assert_cursor_in_bounds(session)

    def test_cursor_never_leaves_bounds(self):
        session = ReadingSession("one two three four five six seven")
        session.toggle_play()
        for step in range(50):
            if step % 7 == 3:
                session.toggle_play()
            session.advance()
            _assert_cursor_in_bounds(session)


# ---------------------------------------------------------------------------
# TestProgress
# ---------------------------------------------------------------------------


class TestProgress:

    def test_middle_of_five_words_is_fifty(self):
        assert compute_progress(2, 5) == 50.0

    def test_single_word_is_zero(self):
        assert compute_progress(0, 1) == 0

    def test_empty_is_zero(self):
        assert compute_progress(0, 0) == 0

    def test_last_word_is_hundred(self, sample_session):
        sample_session.advance()
        sample_session.advance()
        assert sample_session.progress == 100.0


# ---------------------------------------------------------------------------
# TestSubscriptions
# ---------------------------------------------------------------------------


class TestSubscriptions:

    def test_each_transition_publishes(self, sample_session, recorder):
        sample_session.subscribe(recorder)
        sample_session.toggle_play()
        sample_session.advance()
        sample_session.set_speed(500)
        sample_session.reset()
        assert len(recorder.snapshots) == 4

    def test_snapshot_carries_display_contract(self, sample_session, recorder):
        sample_session.subscribe(recorder)
        sample_session.advance()
        snap = recorder.last
        assert snap.word.text == "There,"
        assert snap.current_index == 1
        assert snap.word_count == 3
        assert snap.progress == 50.0

    def test_empty_snapshot_has_no_word(self, recorder):
        session = ReadingSession("text")
        session.subscribe(recorder)
        session.load_text("")
        assert recorder.last.word is None
        assert recorder.last.progress == 0

    def test_load_marks_words_changed(self, sample_session, recorder):
        sample_session.subscribe(recorder)
        sample_session.load_text("new")
        sample_session.toggle_play()
        assert recorder.snapshots[0].words_changed
        assert not recorder.snapshots[1].words_changed

    def test_unsubscribe_stops_notifications(self, sample_session, recorder):
        unsubscribe = sample_session.subscribe(recorder)
        unsubscribe()
        sample_session.toggle_play()
        assert recorder.snapshots == []
