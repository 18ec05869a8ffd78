"""Tests for the mirrored playback state."""

import threading

import pytest
from libwebmedia.core.events import EventBus
from libwebmedia.core.playback_state import (
    PlaybackState,
    PlaybackStateMirror,
    PlayerStatus,
    StateUpdate,
    next_status,
)


class TestPlaybackState:
    """Test the immutable snapshot and its transitions."""

    def test_initial_state(self):
        state = PlaybackState()
        assert state.status is PlayerStatus.IDLE
        assert state.is_playing is False
        assert state.is_buffering is False
        assert state.is_completed is False
        assert (state.position_ms, state.duration_ms) == (0, 0)
        assert (state.volume, state.rate) == (0.0, 0.0)

    @pytest.mark.parametrize("current, flag, value, expected", [
        (PlayerStatus.IDLE, "is_playing", True, PlayerStatus.PLAYING),
        (PlayerStatus.PAUSED, "is_playing", True, PlayerStatus.PLAYING),
        (PlayerStatus.COMPLETED, "is_playing", True, PlayerStatus.PLAYING),
        (PlayerStatus.BUFFERING, "is_playing", True, PlayerStatus.BUFFERING),
        (PlayerStatus.PLAYING, "is_playing", False, PlayerStatus.PAUSED),
        (PlayerStatus.BUFFERING, "is_playing", False, PlayerStatus.PAUSED),
        (PlayerStatus.IDLE, "is_playing", False, PlayerStatus.IDLE),
        (PlayerStatus.COMPLETED, "is_playing", False, PlayerStatus.COMPLETED),
        (PlayerStatus.PLAYING, "is_buffering", True, PlayerStatus.BUFFERING),
        (PlayerStatus.IDLE, "is_buffering", True, PlayerStatus.LOADING),
        (PlayerStatus.BUFFERING, "is_buffering", False, PlayerStatus.PLAYING),
        (PlayerStatus.LOADING, "is_buffering", False, PlayerStatus.PAUSED),
        (PlayerStatus.PAUSED, "is_buffering", False, PlayerStatus.PAUSED),
        (PlayerStatus.PLAYING, "is_completed", True, PlayerStatus.COMPLETED),
        (PlayerStatus.COMPLETED, "is_completed", False, PlayerStatus.PAUSED),
        (PlayerStatus.PLAYING, "is_completed", False, PlayerStatus.PLAYING),
    ])
    def test_transitions(self, current, flag, value, expected):
        assert next_status(current, flag, value) is expected

    def test_playing_and_completed_exclusive(self):
        """No sequence of flags can report playing and completed at once."""
        state = PlaybackState()
        sequence = [
            ("is_playing", True), ("is_completed", True), ("is_playing", True),
            ("is_buffering", True), ("is_completed", True), ("is_playing", False),
        ]
        for field, value in sequence:
            state = state.apply(field, value)
            assert not (state.is_playing and state.is_completed)

    def test_ended_sequence(self):
        """The element's ended event reports pause then completion."""
        state = PlaybackState().apply("is_playing", True)
        state = state.apply("is_playing", False).apply("is_completed", True)
        assert state.is_completed is True
        assert state.is_playing is False

    def test_position_clamped_to_duration(self):
        state = PlaybackState().apply("position_ms", 5000)
        assert state.position_ms == 5000
        state = state.apply("duration_ms", 3000).apply("position_ms", 4000)
        assert state.position_ms == 3000
        assert state.apply("position_ms", -5).position_ms == 0

    def test_shorter_duration_pulls_position_back(self):
        state = PlaybackState().apply("position_ms", 5000).apply("duration_ms", 3000)
        assert (state.position_ms, state.duration_ms) == (3000, 3000)

    def test_unknown_duration_keeps_position(self):
        state = PlaybackState().apply("position_ms", 5000).apply("duration_ms", 0)
        assert (state.position_ms, state.duration_ms) == (5000, 0)

    def test_unknown_field(self):
        with pytest.raises(KeyError):
            PlaybackState().apply("color", 1)


class TestPlaybackStateMirror:
    """Test the queue-fed state owner."""

    def test_updates_applied_in_order(self):
        mirror = PlaybackStateMirror()
        mirror.post(StateUpdate("volume", 0.2))
        mirror.post(StateUpdate("volume", 0.7))
        assert mirror.state.volume == 0.7

    def test_post_does_not_apply_until_flush(self):
        mirror = PlaybackStateMirror()
        mirror.post(StateUpdate("rate", 1.5))
        assert mirror.flush().rate == 1.5

    def test_post_rejects_unknown_field(self):
        with pytest.raises(KeyError):
            PlaybackStateMirror().post(StateUpdate("color", 1))

    def test_publishes_changes(self):
        bus = EventBus()
        received = []
        for event in (
            EventBus.PLAYBACK_STATE_CHANGED,
            EventBus.PLAYBACK_PROGRESS,
            EventBus.VOLUME_CHANGED,
            EventBus.RATE_CHANGED,
        ):
            bus.subscribe(event, lambda data, event=event: received.append((event, data)))

        mirror = PlaybackStateMirror(bus)
        mirror.post(StateUpdate("is_playing", True))
        mirror.post(StateUpdate("duration_ms", 9000))
        mirror.post(StateUpdate("volume", 0.5))
        mirror.post(StateUpdate("rate", 2.0))
        mirror.flush()

        assert received == [
            (EventBus.PLAYBACK_STATE_CHANGED, {"state": PlayerStatus.PLAYING}),
            (EventBus.PLAYBACK_PROGRESS, {"position_ms": 0, "duration_ms": 9000}),
            (EventBus.VOLUME_CHANGED, {"volume": 0.5}),
            (EventBus.RATE_CHANGED, {"rate": 2.0}),
        ]

    def test_unchanged_value_not_published(self):
        bus = EventBus()
        received = []
        bus.subscribe(EventBus.VOLUME_CHANGED, received.append)
        mirror = PlaybackStateMirror(bus)
        mirror.post(StateUpdate("volume", 0.5))
        mirror.post(StateUpdate("volume", 0.5))
        mirror.flush()
        assert received == [{"volume": 0.5}]

    def test_render_thread_writer_with_reader(self):
        mirror = PlaybackStateMirror()

        def writer():
            for position in range(1, 501):
                mirror.post(StateUpdate("position_ms", position))
                mirror.flush()

        thread = threading.Thread(target=writer)
        thread.start()
        while thread.is_alive():
            assert 0 <= mirror.state.position_ms <= 500
        thread.join()
        assert mirror.state.position_ms == 500
