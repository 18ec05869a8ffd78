"""Pytest configuration and fixtures."""

import os
import shutil
import sys
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Keep config and log files out of the real home directory
_XDG_ROOT = Path(tempfile.mkdtemp(prefix="libwebmedia-tests-"))
os.environ['XDG_CONFIG_HOME'] = str(_XDG_ROOT / 'config')
os.environ['XDG_CACHE_HOME'] = str(_XDG_ROOT / 'cache')
os.environ['XDG_DATA_HOME'] = str(_XDG_ROOT / 'data')

# Mock GTK and WebKit before imports
sys.modules['gi'] = MagicMock()
sys.modules['gi.repository'] = MagicMock()
sys.modules['gi.repository.GLib'] = MagicMock()
sys.modules['gi.repository.Gtk'] = MagicMock()
sys.modules['gi.repository.WebKit'] = MagicMock()


class FakeSurface:
    """
    Stand-in for the web view that behaves like the player document.

    Statements are recorded in order. pause/play/volume/rate statements answer
    with the notifications a media element would fire, so state round-trips
    through the real ingestion path.
    """

    def __init__(self, echo: bool = True):
        self.echo = echo
        self.handlers = {}
        self.scripts = []
        self.calls = []
        self.source = None
        self.terminated = False
        self.window_visible = None

    def bind(self, channel, handler):
        self.handlers[channel] = handler

    def notify(self, channel, payload="[null]"):
        self.handlers[channel](payload)

    def ready(self):
        self.notify("initialized", "[null]")

    def evaluate(self, script):
        self.scripts.append(script)
        self.calls.append(("eval", script))
        if script.startswith("player.src = "):
            self.source = script
        if not self.echo:
            return
        if script == "player.pause();":
            self.notify("isPlaying", "[false]")
        elif script == "player.play();":
            self.notify("isPlaying", "[true]")
            self.notify("isCompleted", "[false]")
        elif script.startswith("player.volume = "):
            self.notify("volume", "[%s]" % script[len("player.volume = "):-1])
        elif script.startswith("player.playbackRate = "):
            self.notify("rate", "[%s]" % script[len("player.playbackRate = "):-1])

    def set_window_visible(self, visible):
        self.window_visible = visible
        self.calls.append(("visible", visible))

    def terminate(self):
        self.terminated = True
        self.calls.append(("terminate", None))

    def run(self):
        self.calls.append(("run", None))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def mock_config(monkeypatch, temp_dir):
    """Configuration rooted in a temporary directory."""
    from libwebmedia.core.config import Config

    monkeypatch.setenv('XDG_CONFIG_HOME', str(temp_dir / 'config'))
    monkeypatch.setenv('XDG_CACHE_HOME', str(temp_dir / 'cache'))
    monkeypatch.setenv('XDG_DATA_HOME', str(temp_dir / 'data'))
    monkeypatch.setattr(Config, '_instance', None)

    config = Config.get_instance()
    config.set('document', 'source_dir', str(temp_dir / 'documents'))
    return config


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def make_surface():
    """Factory for extra FakeSurface instances, e.g. without echoing."""
    return FakeSurface


@pytest.fixture
def controller(surface, mock_config):
    """Controller wired to a FakeSurface that has already signaled readiness."""
    from libwebmedia.core.controller import Controller

    player = Controller(7, surface=surface, config=mock_config)
    surface.ready()
    return player


