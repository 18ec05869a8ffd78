"""Playlist management for media items."""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from libwebmedia.core.events import EventBus
from libwebmedia.core.exceptions import PlaylistError, PlaylistIndexError
from libwebmedia.core.logging import get_logger
from libwebmedia.core.security import SecurityValidator

logger = get_logger(__name__)


@dataclass(frozen=True)
class MediaItem:
    """One playlist entry: caller-supplied id and the URI to load."""

    id: int
    uri: str


class PlaylistManager:
    """Owns the ordered media items and the current index.

    Navigation is checked: the target is resolved before the index moves, so a
    failed next()/back()/jump() leaves the playlist exactly as it was.
    """

    def __init__(self, event_bus: Optional[EventBus] = None) -> None:
        self._events = event_bus
        self._items: Tuple[MediaItem, ...] = ()
        self._current_index: int = 0

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> Tuple[MediaItem, ...]:
        return self._items

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_item(self) -> Optional[MediaItem]:
        if 0 <= self._current_index < len(self._items):
            return self._items[self._current_index]
        return None

    def open(self, uris: Sequence[str], ids: Sequence[int]) -> MediaItem:
        """
        Replace the playlist and cue its first item.

        Args:
            uris: Media URIs in playback order
            ids: Caller ids, one per URI

        Returns:
            The first item, which the caller loads without playing

        Raises:
            PlaylistError: The sequences differ in length, are empty, or an id
                is not an integer.
            SecurityError: A URI fails validation.
        """
        uris = list(uris)
        ids = list(ids)
        if len(uris) != len(ids):
            raise PlaylistError(
                f"Got {len(uris)} URIs but {len(ids)} ids; they must pair up"
            )
        if not uris:
            raise PlaylistError("Cannot open an empty playlist")
        for item_id in ids:
            if isinstance(item_id, bool) or not isinstance(item_id, int):
                raise PlaylistError(f"Media id must be an integer: {item_id!r}")

        items = tuple(
            MediaItem(item_id, SecurityValidator.validate_media_uri(uri))
            for uri, item_id in zip(uris, ids)
        )
        self._items = items
        self._current_index = 0
        logger.info("Opened playlist with %d item(s)", len(items))

        if self._events:
            self._events.publish(EventBus.PLAYLIST_CHANGED, {"items": items})
            self._publish_index()
        return items[0]

    def resolve(self, index: int) -> MediaItem:
        """
        Look up an item without moving the current index.

        Raises:
            PlaylistIndexError: index is outside the playlist (negative
                indices are never counted from the end).
        """
        if not 0 <= index < len(self._items):
            raise PlaylistIndexError(index, len(self._items))
        return self._items[index]

    def jump(self, index: int) -> MediaItem:
        """Make ``index`` current and return its item."""
        item = self.resolve(index)
        self._current_index = index
        logger.debug("Current index -> %d (id %d)", index, item.id)
        if self._events:
            self._publish_index()
        return item

    def next(self) -> MediaItem:
        """Advance one item; never wraps."""
        return self.jump(self._current_index + 1)

    def back(self) -> MediaItem:
        """Step back one item; never wraps."""
        return self.jump(self._current_index - 1)

    def _publish_index(self) -> None:
        self._events.publish(
            EventBus.CURRENT_INDEX_CHANGED,
            {"index": self._current_index, "item": self.current_item},
        )
