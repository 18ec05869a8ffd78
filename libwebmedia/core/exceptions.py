"""Custom exception hierarchy for the media player controller.

This module provides a structured exception hierarchy for consistent
error handling across the library.
"""


class MediaPlayerError(Exception):
    """Base exception for all media player errors."""

    pass


class PlayerError(MediaPlayerError):
    """Errors related to driving the rendering surface."""

    pass


class NotReadyError(PlayerError):
    """The rendering surface did not signal readiness in time."""

    pass


class SessionTerminatedError(PlayerError):
    """A command was issued after the session was stopped."""

    pass


class InvalidCommandError(PlayerError):
    """A transport command carried an unusable argument."""

    pass


class SurfaceError(PlayerError):
    """Errors raised by the rendering surface or its window."""

    pass


class PlaylistError(MediaPlayerError):
    """Errors related to playlist operations."""

    pass


class PlaylistIndexError(PlaylistError, IndexError):
    """Navigation target lies outside the playlist."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Playlist index {index} out of range (size {size})")
        self.index = index
        self.size = size


class MalformedNotification(MediaPlayerError, ValueError):
    """A renderer notification payload could not be parsed."""

    def __init__(self, channel: str, payload: str, reason: str = ""):
        message = f"Malformed {channel!r} notification: {payload!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.channel = channel
        self.payload = payload


class ConfigurationError(MediaPlayerError):
    """Errors related to configuration."""

    pass


class SecurityError(MediaPlayerError):
    """Errors related to security validation."""

    pass
