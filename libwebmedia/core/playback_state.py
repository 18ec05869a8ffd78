"""Mirrored playback state reported by the rendering surface."""

# ============================================================================
# Standard Library Imports (alphabetical)
# ============================================================================
import queue
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# ============================================================================
# Local Imports (grouped by package, alphabetical)
# ============================================================================
from libwebmedia.core.events import EventBus
from libwebmedia.core.logging import get_logger

logger = get_logger(__name__)


class PlayerStatus(Enum):
    """State of the media element as last reported by the renderer."""

    IDLE = "idle"  # Nothing reported yet
    LOADING = "loading"  # Fetching data without playback intent
    PLAYING = "playing"
    PAUSED = "paused"
    BUFFERING = "buffering"  # Playback intent but stalled on data
    COMPLETED = "completed"


# (flag, value) -> {from_status: to_status}; unlisted statuses are kept
_TRANSITIONS: Dict[Tuple[str, bool], Dict[PlayerStatus, PlayerStatus]] = {
    ("is_playing", True): {
        PlayerStatus.IDLE: PlayerStatus.PLAYING,
        PlayerStatus.LOADING: PlayerStatus.PLAYING,
        PlayerStatus.PLAYING: PlayerStatus.PLAYING,
        PlayerStatus.PAUSED: PlayerStatus.PLAYING,
        PlayerStatus.COMPLETED: PlayerStatus.PLAYING,
    },
    ("is_playing", False): {
        PlayerStatus.PLAYING: PlayerStatus.PAUSED,
        PlayerStatus.BUFFERING: PlayerStatus.PAUSED,
    },
    ("is_buffering", True): {
        PlayerStatus.PLAYING: PlayerStatus.BUFFERING,
        PlayerStatus.IDLE: PlayerStatus.LOADING,
        PlayerStatus.PAUSED: PlayerStatus.LOADING,
    },
    ("is_buffering", False): {
        PlayerStatus.BUFFERING: PlayerStatus.PLAYING,
        PlayerStatus.LOADING: PlayerStatus.PAUSED,
    },
    ("is_completed", True): {status: PlayerStatus.COMPLETED for status in PlayerStatus},
    ("is_completed", False): {
        PlayerStatus.COMPLETED: PlayerStatus.PAUSED,
    },
}

STATUS_FLAGS = ("is_playing", "is_buffering", "is_completed")
FIELDS = STATUS_FLAGS + ("position_ms", "duration_ms", "volume", "rate")


def next_status(current: PlayerStatus, flag: str, value: bool) -> PlayerStatus:
    """Resolve the status reached when a boolean notification arrives."""
    return _TRANSITIONS[(flag, value)].get(current, current)


@dataclass(frozen=True)
class PlaybackState:
    """Immutable snapshot of the mirrored state."""

    status: PlayerStatus = PlayerStatus.IDLE
    position_ms: int = 0
    duration_ms: int = 0  # 0 means unknown
    volume: float = 0.0
    rate: float = 0.0

    @property
    def is_playing(self) -> bool:
        return self.status in (PlayerStatus.PLAYING, PlayerStatus.BUFFERING)

    @property
    def is_buffering(self) -> bool:
        return self.status in (PlayerStatus.LOADING, PlayerStatus.BUFFERING)

    @property
    def is_completed(self) -> bool:
        return self.status is PlayerStatus.COMPLETED

    def apply(self, field: str, value: Any) -> "PlaybackState":
        """Return the state reached after one notification."""
        if field in STATUS_FLAGS:
            return replace(self, status=next_status(self.status, field, bool(value)))
        if field == "position_ms":
            position = max(0, value)
            if self.duration_ms > 0:
                position = min(position, self.duration_ms)
            return replace(self, position_ms=position)
        if field == "duration_ms":
            duration = max(0, value)
            position = self.position_ms
            if duration > 0:
                position = min(position, duration)
            return replace(self, duration_ms=duration, position_ms=position)
        if field in ("volume", "rate"):
            return replace(self, **{field: value})
        raise KeyError(field)


@dataclass(frozen=True)
class StateUpdate:
    """One parsed notification waiting to be applied."""

    field: str
    value: Any


class PlaybackStateMirror:
    """
    Single owner of PlaybackState.

    Notifications are posted as StateUpdate messages and applied in arrival
    order by flush(), which runs under a lock, so the render thread and the
    control thread never write the state concurrently. Readers flush first,
    making the last posted notification win.
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self._events = event_bus
        self._pending: "queue.SimpleQueue[StateUpdate]" = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._state = PlaybackState()

    def post(self, update: StateUpdate) -> None:
        if update.field not in FIELDS:
            raise KeyError(update.field)
        self._pending.put(update)

    def flush(self) -> PlaybackState:
        """Apply every pending update and return the resulting snapshot."""
        changes: List[Tuple[PlaybackState, PlaybackState]] = []
        with self._lock:
            while True:
                try:
                    update = self._pending.get_nowait()
                except queue.Empty:
                    break
                old = self._state
                self._state = old.apply(update.field, update.value)
                if self._state != old:
                    changes.append((old, self._state))
            state = self._state
        for old, new in changes:
            self._publish_change(old, new)
        return state

    @property
    def state(self) -> PlaybackState:
        return self.flush()

    def _publish_change(self, old: PlaybackState, new: PlaybackState) -> None:
        if self._events is None:
            return
        if old.status is not new.status:
            logger.debug("Playback status %s -> %s", old.status.value, new.status.value)
            self._events.publish(EventBus.PLAYBACK_STATE_CHANGED, {"state": new.status})
        if (old.position_ms, old.duration_ms) != (new.position_ms, new.duration_ms):
            self._events.publish(
                EventBus.PLAYBACK_PROGRESS,
                {"position_ms": new.position_ms, "duration_ms": new.duration_ms},
            )
        if old.volume != new.volume:
            self._events.publish(EventBus.VOLUME_CHANGED, {"volume": new.volume})
        if old.rate != new.rate:
            self._events.publish(EventBus.RATE_CHANGED, {"rate": new.rate})
