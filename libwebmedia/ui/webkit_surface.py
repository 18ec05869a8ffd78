"""GTK window with a WebKit view acting as the rendering surface.

All widget access happens on the thread that calls run(); calls arriving from
other threads are queued onto that thread's main loop with GLib.idle_add.
"""

from typing import Callable, Dict, Optional, Tuple

import gi
gi.require_version('Gtk', '4.0')
gi.require_version('WebKit', '6.0')
from gi.repository import GLib, Gtk, WebKit

from libwebmedia.core.exceptions import SurfaceError
from libwebmedia.core.logging import get_logger

logger = get_logger(__name__)


class WebKitSurface:
    """Hosts the player document and bridges script messages to Python."""

    def __init__(
        self,
        document_uri: str,
        title: str = "libwebmedia",
        size: Tuple[int, int] = (480, 360),
        show_window: bool = False,
        on_closed: Optional[Callable[[], None]] = None,
    ):
        self._document_uri = document_uri
        self._title = title
        self._size = size
        self._show_window = show_window
        self._on_closed = on_closed
        self._handlers: Dict[str, Callable[[str], None]] = {}
        self._loop = GLib.MainLoop()
        self._window = None
        self._webview = None
        self._terminated = False

    def bind(self, channel: str, handler: Callable[[str], None]) -> None:
        """Route messages posted on ``channel`` to ``handler``."""
        if self._webview is not None:
            raise SurfaceError("Channels must be bound before run()")
        self._handlers[channel] = handler

    def run(self) -> None:
        """Build the window and block in the render loop until terminated."""
        if self._terminated:
            logger.warning("run() called on a terminated surface")
            return
        self._build()
        logger.debug("Entering render loop")
        self._loop.run()
        logger.debug("Render loop finished")

    def _build(self) -> None:
        Gtk.init()

        manager = WebKit.UserContentManager()
        for channel in self._handlers:
            manager.register_script_message_handler(channel, None)
            manager.connect(
                f"script-message-received::{channel}", self._on_script_message, channel
            )

        self._webview = WebKit.WebView(user_content_manager=manager)

        self._window = Gtk.Window(title=self._title)
        self._window.set_default_size(*self._size)
        self._window.set_child(self._webview)
        self._window.connect('close-request', self._on_close_request)

        self._webview.load_uri(self._document_uri)
        self._window.set_visible(self._show_window)

    def _on_script_message(self, manager, value, channel: str) -> None:
        handler = self._handlers.get(channel)
        if handler is None:
            return
        handler(value.to_string())

    def evaluate(self, script: str) -> None:
        """Run ``script`` in the document; fire and forget."""
        GLib.idle_add(self._evaluate_now, script)

    def _evaluate_now(self, script: str) -> bool:
        if self._webview is None:
            logger.warning("Dropping script, surface not built: %s", script)
            return GLib.SOURCE_REMOVE
        self._webview.evaluate_javascript(
            script, -1, None, None, None, self._on_evaluated, script
        )
        return GLib.SOURCE_REMOVE

    def _on_evaluated(self, webview, result, script: str) -> None:
        try:
            webview.evaluate_javascript_finish(result)
        except GLib.Error as e:
            logger.warning("Script failed (%s): %s", script, e.message)

    def set_window_visible(self, visible: bool) -> None:
        GLib.idle_add(self._set_visible_now, visible)

    def _set_visible_now(self, visible: bool) -> bool:
        if self._window is not None:
            if visible:
                self._window.present()
            else:
                self._window.set_visible(False)
        return GLib.SOURCE_REMOVE

    def terminate(self) -> None:
        """Destroy the window and leave the render loop."""
        self._terminated = True
        GLib.idle_add(self._terminate_now)

    def _terminate_now(self) -> bool:
        if self._window is not None:
            window, self._window = self._window, None
            window.destroy()
        self._webview = None
        self._loop.quit()
        return GLib.SOURCE_REMOVE

    def _on_close_request(self, window) -> bool:
        logger.info("Player window closed, ending session")
        self._terminated = True
        if self._on_closed is not None:
            self._on_closed()
        self._window = None
        self._webview = None
        self._loop.quit()
        # Let GTK destroy the window
        return False
