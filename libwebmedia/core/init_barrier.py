"""One-shot readiness gate between the render thread and the control thread."""

import threading
from typing import Optional

from libwebmedia.core.exceptions import NotReadyError
from libwebmedia.core.logging import get_logger

logger = get_logger(__name__)


class InitBarrier:
    """
    Blocks callers until the rendering surface has loaded the player document.

    The barrier is signaled once and never reset. Waiting is unbounded by
    default; passing a timeout turns an absent ready notification into
    NotReadyError instead of a permanent hang.
    """

    def __init__(self, default_timeout: Optional[float] = None):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._default_timeout = default_timeout

    @property
    def is_signaled(self) -> bool:
        return self._event.is_set()

    def signal(self) -> bool:
        """Release all waiters. Returns False when already signaled."""
        with self._lock:
            if self._event.is_set():
                logger.debug("Ready notification repeated, ignoring")
                return False
            self._event.set()
        logger.info("Rendering surface ready, releasing waiters")
        return True

    def wait_until_ready(self, timeout: Optional[float] = None) -> None:
        """
        Wait for the ready notification.

        Args:
            timeout: Seconds to wait; falls back to the barrier default, and
                None waits forever.

        Raises:
            NotReadyError: The timeout expired before the surface was ready.
        """
        if self._event.is_set():
            return
        if timeout is None:
            timeout = self._default_timeout
        if not self._event.wait(timeout):
            raise NotReadyError(
                f"Rendering surface not ready after {timeout:.1f}s"
            )
