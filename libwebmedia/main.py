#!/usr/bin/env python3
"""libwebmedia - play media files in an embedded web view."""

import argparse
import sys
import threading
from typing import List, Optional

from libwebmedia.core.config import get_config
from libwebmedia.core.events import EventBus
from libwebmedia.core.exceptions import MediaPlayerError
from libwebmedia.core.logging import LinuxLogger, get_logger
from libwebmedia.core.playback_state import PlayerStatus
from libwebmedia.core.security import SecurityValidator

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="libwebmedia", description="Play media files in an embedded web view."
    )
    parser.add_argument("media", nargs="+", help="files or URIs, played in order")
    parser.add_argument("--show", action="store_true", help="show the player window")
    parser.add_argument("--title", default=None, help="window title")
    parser.add_argument("--volume", type=float, default=None, help="volume, 0.0 to 1.0")
    parser.add_argument("--rate", type=float, default=None, help="playback rate")
    return parser


def resolve_media(items: List[str]) -> List[str]:
    """Map command line arguments to media URIs, dropping missing files."""
    uris = []
    for item in items:
        uri = SecurityValidator.path_to_media_uri(item)
        if uri is None:
            print(f"Skipping {item}: not found", file=sys.stderr)
            continue
        uris.append(uri)
    return uris


def advance_on_completion(controller) -> None:
    """Move to the next item when one ends; stop after the last."""

    def on_state_changed(data) -> None:
        if data["state"] is not PlayerStatus.COMPLETED:
            return
        if controller.current_index + 1 < len(controller.playlist):
            controller.next()
        elif not controller.is_terminated:
            controller.stop()

    controller.events.subscribe(EventBus.PLAYBACK_STATE_CHANGED, on_state_changed)


def start_playback(controller, uris: List[str], args: argparse.Namespace) -> None:
    """Control-thread body: cue the playlist and start it."""
    try:
        controller.open(uris, list(range(1, len(uris) + 1)))
        if args.volume is not None:
            controller.set_volume(args.volume)
        if args.rate is not None:
            controller.set_rate(args.rate)
        controller.play()
    except MediaPlayerError as e:
        logger.error("Cannot start playback: %s", e)
        if not controller.is_terminated:
            controller.stop()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    config = get_config()
    LinuxLogger(log_dir=config.log_dir)

    uris = resolve_media(args.media)
    if not uris:
        print("Nothing to play", file=sys.stderr)
        return 1

    from libwebmedia.core.controller import Controller

    controller = Controller(
        1, show_window=args.show or config.show_window, window_title=args.title
    )
    advance_on_completion(controller)
    control = threading.Thread(
        target=start_playback, args=(controller, uris, args), name="control", daemon=True
    )
    control.start()
    controller.run()
    return 0


if __name__ == '__main__':
    sys.exit(main())
