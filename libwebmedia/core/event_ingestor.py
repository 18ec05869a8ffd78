"""Turns notifications from the player document into playback state updates.

The document calls one function per channel with a single argument; the
surface hands us that call as a JSON-like string such as ``[true]`` or
``[1234]``. One layer of wrapping is stripped before the value is parsed
according to the channel's type.
"""

import math
from typing import Any, Callable, Dict, Optional, Tuple

from libwebmedia.core.events import EventBus
from libwebmedia.core.exceptions import MalformedNotification
from libwebmedia.core.init_barrier import InitBarrier
from libwebmedia.core.logging import get_logger
from libwebmedia.core.playback_state import PlaybackStateMirror, StateUpdate

logger = get_logger(__name__)

READY_CHANNEL = "initialized"

# channel name -> (state field, payload kind)
CHANNELS: Dict[str, Tuple[str, str]] = {
    "isPlaying": ("is_playing", "bool"),
    "isBuffering": ("is_buffering", "bool"),
    "isCompleted": ("is_completed", "bool"),
    "position": ("position_ms", "int"),
    "duration": ("duration_ms", "int"),
    "volume": ("volume", "float"),
    "rate": ("rate", "float"),
}

_WRAPPERS = (("[", "]"), ('"', '"'), ("'", "'"))


def unwrap_payload(raw: str) -> str:
    """Strip one layer of brackets or quotes around a payload."""
    text = raw.strip()
    for opening, closing in _WRAPPERS:
        if len(text) >= 2 and text.startswith(opening) and text.endswith(closing):
            return text[1:-1].strip()
    return text


def parse_bool(text: str) -> bool:
    # Anything but a literal true counts as false
    return text == "true"


def parse_int(channel: str, text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise MalformedNotification(channel, text, "expected an integer") from None


def parse_float(channel: str, text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise MalformedNotification(channel, text, "expected a number") from None
    if not math.isfinite(value):
        raise MalformedNotification(channel, text, "expected a finite number")
    return value


class EventIngestor:
    """Binds the document's channels and feeds parsed values to the state mirror."""

    def __init__(
        self,
        mirror: PlaybackStateMirror,
        barrier: InitBarrier,
        event_bus: Optional[EventBus] = None,
        on_ready: Optional[Callable[[], None]] = None,
    ):
        self._mirror = mirror
        self._barrier = barrier
        self._events = event_bus
        self._on_ready = on_ready

    def bind(self, surface) -> None:
        """Register a handler for every channel on the rendering surface."""
        surface.bind(READY_CHANNEL, self._make_handler(READY_CHANNEL))
        for channel in CHANNELS:
            surface.bind(channel, self._make_handler(channel))

    def parse(self, channel: str, raw: str) -> Tuple[str, Any]:
        """Parse a raw payload into (field, value) without applying it."""
        try:
            field, kind = CHANNELS[channel]
        except KeyError:
            raise MalformedNotification(channel, raw, "unknown channel") from None
        text = unwrap_payload(raw)
        if kind == "bool":
            return field, parse_bool(text)
        if kind == "int":
            return field, parse_int(channel, text)
        return field, parse_float(channel, text)

    def ingest(self, channel: str, raw: str) -> None:
        """
        Apply one notification.

        Raises:
            MalformedNotification: The payload does not parse; state is untouched.
        """
        if channel == READY_CHANNEL:
            if self._barrier.signal() and self._on_ready is not None:
                self._on_ready()
            return
        field, value = self.parse(channel, raw)
        self._mirror.post(StateUpdate(field, value))
        self._mirror.flush()

    def _make_handler(self, channel: str) -> Callable[[str], None]:
        def handler(raw: str) -> None:
            try:
                self.ingest(channel, raw)
            except MalformedNotification as e:
                # Keep the render loop alive; report instead of crashing
                logger.error("%s", e)
                if self._events is not None:
                    self._events.publish(
                        EventBus.NOTIFICATION_ERROR, {"channel": channel, "error": e}
                    )

        return handler
