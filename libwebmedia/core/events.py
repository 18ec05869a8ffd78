"""Event bus letting embedders observe the mirrored player state."""

import threading
from typing import Any, Callable, Dict, List

from libwebmedia.core.logging import get_logger

logger = get_logger(__name__)


class EventBus:
    """Publish-subscribe event system. Components publish/subscribe without knowing each other.

    Event Flow Architecture:
    - The state mirror publishes PLAYBACK_* / VOLUME_* / RATE_* events when a
      renderer notification changes a field
    - PlaylistManager publishes PLAYLIST_CHANGED / CURRENT_INDEX_CHANGED
    - Controller publishes READY and SESSION_TERMINATED

    Callbacks run on whichever thread published the event, usually the render thread.
    """

    # Session lifecycle
    READY = "session.ready"
    SESSION_TERMINATED = "session.terminated"

    # Playback state: {"state": PlayerStatus}
    PLAYBACK_STATE_CHANGED = "playback.state_changed"
    # Unified progress event: {"position_ms": int, "duration_ms": int}
    PLAYBACK_PROGRESS = "playback.progress"
    VOLUME_CHANGED = "volume.changed"
    RATE_CHANGED = "rate.changed"

    # Playlist state (published by PlaylistManager)
    PLAYLIST_CHANGED = "playlist.changed"
    CURRENT_INDEX_CHANGED = "playlist.current_index_changed"

    # Bridge errors: {"channel": str, "error": MalformedNotification}
    NOTIFICATION_ERROR = "bridge.notification_error"

    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[Any], None]]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event: str, callback: Callable[[Any], None]) -> None:
        with self._lock:
            self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[[Any], None]) -> None:
        with self._lock:
            if event in self._subscribers:
                try:
                    self._subscribers[event].remove(callback)
                except ValueError:
                    pass

    def publish(self, event: str, data: Any = None) -> None:
        with self._lock:
            callbacks = list(self._subscribers.get(event, []))
        for callback in callbacks:
            try:
                callback(data)
            except Exception as e:
                logger.error(
                    "Error in event callback for %s: %s", event, e, exc_info=True
                )
