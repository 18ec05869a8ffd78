"""Controller - public face of an embedded media player.

Composes the readiness barrier, the notification ingestor, the playlist and
the command dispatcher around one rendering surface. run() is called on the
render thread; every other operation is meant for a control thread and blocks
until the surface has loaded the player document.
"""

from typing import Optional, Sequence, Tuple

from libwebmedia.core.command_dispatcher import CommandDispatcher
from libwebmedia.core.config import Config, get_config
from libwebmedia.core.event_ingestor import EventIngestor
from libwebmedia.core.events import EventBus
from libwebmedia.core.init_barrier import InitBarrier
from libwebmedia.core.logging import get_logger
from libwebmedia.core.playback_state import PlaybackStateMirror, PlayerStatus
from libwebmedia.core.playlist_manager import MediaItem, PlaylistManager

logger = get_logger(__name__)


class Controller:
    """Drives one rendering surface playing an ordered list of media items."""

    def __init__(
        self,
        player_id: int,
        show_window: Optional[bool] = None,
        window_title: Optional[str] = None,
        *,
        surface=None,
        event_bus: Optional[EventBus] = None,
        config: Optional[Config] = None,
    ):
        """
        Args:
            player_id: Identifier of this player instance
            show_window: Show the native window at startup (config default)
            window_title: Title of the native window (config default)
            surface: Rendering surface; a WebKitSurface is built when omitted
            event_bus: Bus receiving state notifications (a new one by default)
            config: Configuration (the shared instance by default)
        """
        config = config or get_config()
        self._id = player_id
        self._events = event_bus or EventBus()
        self._source_path = None

        if surface is None:
            surface = self._create_surface(
                config,
                show_window if show_window is not None else config.show_window,
                window_title or config.window_title,
            )
        self._surface = surface

        self._barrier = InitBarrier(default_timeout=config.ready_timeout)
        self._mirror = PlaybackStateMirror(self._events)
        self._playlist = PlaylistManager(self._events)
        self._dispatcher = CommandDispatcher(
            surface, self._barrier, on_terminated=self._on_terminated
        )
        self._ingestor = EventIngestor(
            self._mirror, self._barrier, self._events, on_ready=self._on_ready
        )
        self._ingestor.bind(surface)

    def _create_surface(self, config: Config, show_window: bool, title: str):
        from libwebmedia.ui.player_document import PlayerDocument
        from libwebmedia.ui.webkit_surface import WebKitSurface

        document = PlayerDocument(
            config.source_dir,
            self._id if config.per_instance_source else None,
        )
        self._source_path = document.write()
        return WebKitSurface(
            document.uri,
            title=title,
            size=config.window_size,
            show_window=show_window,
            on_closed=self._on_window_closed,
        )

    def _on_ready(self) -> None:
        self._events.publish(EventBus.READY, {"player_id": self._id})

    def _on_terminated(self) -> None:
        self._events.publish(EventBus.SESSION_TERMINATED, {"player_id": self._id})

    def _on_window_closed(self) -> None:
        self._dispatcher.mark_terminated()

    # ------------------------------------------------------------------
    # Window
    # ------------------------------------------------------------------
    def show_window(self) -> None:
        self._dispatcher.show_window()

    def close_window(self) -> None:
        self._dispatcher.close_window()

    # ------------------------------------------------------------------
    # Playlist
    # ------------------------------------------------------------------
    def open(self, uris: Sequence[str], ids: Sequence[int]) -> None:
        """Replace the playlist and cue its first item without playing it."""
        self._dispatcher.ensure_ready()
        item = self._playlist.open(uris, ids)
        self._dispatcher.load(item.uri)

    def jump(self, index: int) -> None:
        """Switch to the item at ``index`` and resume playback."""
        self._dispatcher.ensure_ready()
        item = self._playlist.resolve(index)
        self._switch_to(index, item)

    def next(self) -> None:
        self.jump(self._playlist.current_index + 1)

    def back(self) -> None:
        self.jump(self._playlist.current_index - 1)

    def _switch_to(self, index: int, item: MediaItem) -> None:
        self._dispatcher.pause()
        self._playlist.jump(index)
        logger.info("Switching to item %d (id %d)", index, item.id)
        self._dispatcher.load(item.uri)
        self._dispatcher.play()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def play(self) -> None:
        self._dispatcher.play()

    def pause(self) -> None:
        self._dispatcher.pause()

    def stop(self) -> None:
        """End the session: the surface is torn down and cannot be resumed."""
        self._dispatcher.stop()

    def seek(self, position_ms: int) -> None:
        self._dispatcher.seek(position_ms)

    def set_volume(self, volume: float) -> None:
        self._dispatcher.set_volume(volume)

    def set_rate(self, rate: float) -> None:
        self._dispatcher.set_rate(rate)

    def run(self) -> None:
        """Enter the render loop; returns once the session ends."""
        self._surface.run()

    # ------------------------------------------------------------------
    # Mirrored state
    # ------------------------------------------------------------------
    @property
    def status(self) -> PlayerStatus:
        return self._mirror.state.status

    @property
    def is_playing(self) -> bool:
        return self._mirror.state.is_playing

    @property
    def is_buffering(self) -> bool:
        return self._mirror.state.is_buffering

    @property
    def is_completed(self) -> bool:
        return self._mirror.state.is_completed

    @property
    def position(self) -> int:
        """Playback position in milliseconds."""
        return self._mirror.state.position_ms

    @property
    def duration(self) -> int:
        """Duration in milliseconds, 0 while unknown."""
        return self._mirror.state.duration_ms

    @property
    def volume(self) -> float:
        return self._mirror.state.volume

    @property
    def rate(self) -> float:
        return self._mirror.state.rate

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------
    @property
    def player_id(self) -> int:
        return self._id

    @property
    def current_index(self) -> int:
        return self._playlist.current_index

    @property
    def current_item(self) -> Optional[MediaItem]:
        return self._playlist.current_item

    @property
    def playlist(self) -> Tuple[MediaItem, ...]:
        return self._playlist.items

    @property
    def source_path(self):
        """Path of the player document, None for injected surfaces."""
        return self._source_path

    @property
    def is_ready(self) -> bool:
        return self._barrier.is_signaled

    @property
    def is_terminated(self) -> bool:
        return self._dispatcher.is_terminated

    @property
    def events(self) -> EventBus:
        return self._events
