"""Translates transport commands into statements for the player document."""

import math
import threading
from typing import Callable, Optional

from libwebmedia.core.exceptions import InvalidCommandError, SessionTerminatedError
from libwebmedia.core.init_barrier import InitBarrier
from libwebmedia.core.logging import get_logger
from libwebmedia.core.security import SecurityValidator

logger = get_logger(__name__)

# Element id of the <video> in the player document
ELEMENT = "player"


def _format_number(value: float) -> str:
    return repr(float(value))


class CommandDispatcher:
    """
    Sends scripted instructions to the single media element.

    Every command waits on the InitBarrier first and fails once the session
    has been stopped. Nothing is returned: effects show up later through the
    renderer's notifications.
    """

    def __init__(
        self,
        surface,
        barrier: InitBarrier,
        on_terminated: Optional[Callable[[], None]] = None,
    ):
        self._surface = surface
        self._barrier = barrier
        self._on_terminated = on_terminated
        self._terminated = threading.Event()

    @property
    def is_terminated(self) -> bool:
        return self._terminated.is_set()

    def mark_terminated(self) -> bool:
        """Enter the terminal state. Returns False if it was already entered."""
        if self._terminated.is_set():
            return False
        self._terminated.set()
        logger.info("Playback session terminated")
        if self._on_terminated is not None:
            self._on_terminated()
        return True

    def ensure_ready(self) -> None:
        """Wait for the surface, then refuse to continue a stopped session."""
        self._barrier.wait_until_ready()
        if self._terminated.is_set():
            raise SessionTerminatedError("Session was stopped; create a new player")

    def _evaluate(self, script: str) -> None:
        self.ensure_ready()
        logger.debug("eval: %s", script)
        self._surface.evaluate(script)

    def load(self, uri: str) -> None:
        """Point the element at ``uri`` without starting playback."""
        literal = SecurityValidator.script_string_literal(uri)
        self._evaluate(f"{ELEMENT}.src = encodeURI({literal});")

    def play(self) -> None:
        self._evaluate(f"{ELEMENT}.play();")

    def pause(self) -> None:
        self._evaluate(f"{ELEMENT}.pause();")

    def seek(self, position_ms: int) -> None:
        """Move playback to ``position_ms`` milliseconds."""
        if isinstance(position_ms, bool) or not isinstance(position_ms, int):
            raise InvalidCommandError(f"Seek position must be an integer: {position_ms!r}")
        if position_ms < 0:
            raise InvalidCommandError(f"Seek position must not be negative: {position_ms}")
        self._evaluate(f"{ELEMENT}.currentTime = {position_ms} / 1000.0;")

    def set_volume(self, volume: float) -> None:
        self._evaluate(f"{ELEMENT}.volume = {self._checked_number('volume', volume)};")

    def set_rate(self, rate: float) -> None:
        self._evaluate(f"{ELEMENT}.playbackRate = {self._checked_number('rate', rate)};")

    def stop(self) -> None:
        """Tear down the rendering surface. The session cannot be resumed."""
        self.ensure_ready()
        self._surface.terminate()
        self.mark_terminated()

    def show_window(self) -> None:
        self.ensure_ready()
        self._surface.set_window_visible(True)

    def close_window(self) -> None:
        self.ensure_ready()
        self._surface.set_window_visible(False)

    @staticmethod
    def _checked_number(name: str, value: float) -> str:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise InvalidCommandError(f"{name} must be a number: {value!r}") from None
        if not math.isfinite(number):
            raise InvalidCommandError(f"{name} must be finite: {value!r}")
        return _format_number(number)
