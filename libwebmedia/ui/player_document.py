"""The static HTML document hosting the media element."""

from pathlib import Path
from typing import Optional

from libwebmedia.core.exceptions import SurfaceError
from libwebmedia.core.logging import get_logger

logger = get_logger(__name__)

# Channel functions post their arguments as a JSON array string, e.g. "[true]"
PLAYER_SOURCE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style>
    * {
        background: #000;
        margin: 0;
        padding: 0;
        overflow: hidden;
    }
    body {
        height: 100%;
        width: 100%;
    }
    video {
        height: 100vh;
        width: 100vw;
    }
</style>
</head>
<body>
    <video controls id='player'></video>
<script>
    function channel(name) {
        return function () {
            window.webkit.messageHandlers[name].postMessage(
                JSON.stringify(Array.from(arguments)));
        };
    }
    const initialized = channel('initialized');
    const isPlaying = channel('isPlaying');
    const isBuffering = channel('isBuffering');
    const isCompleted = channel('isCompleted');
    const position = channel('position');
    const duration = channel('duration');
    const volume = channel('volume');
    const rate = channel('rate');

    let player = document.getElementById('player');
    player.addEventListener('play', (event) => {
        isPlaying(true);
        isCompleted(false);
    });
    player.addEventListener('pause', (event) => {
        isPlaying(false);
    });
    player.addEventListener('playing', (event) => {
        isBuffering(false);
    });
    player.addEventListener('waiting', (event) => {
        isBuffering(true);
    });
    player.addEventListener('timeupdate', (event) => {
        position(Math.round(event.target.currentTime * 1000));
    });
    player.addEventListener('durationchange', (event) => {
        const seconds = event.target.duration;
        duration(isFinite(seconds) ? Math.round(seconds * 1000) : 0);
    });
    player.addEventListener('ended', (event) => {
        isPlaying(false);
        isCompleted(true);
    });
    player.addEventListener('volumechange', (event) => {
        volume(event.target.volume);
    });
    player.addEventListener('ratechange', (event) => {
        rate(event.target.playbackRate);
    });
    window.onload = () => initialized(null);
</script>
</body>
</html>
"""


class PlayerDocument:
    """Location of the player document on disk."""

    FILENAME = "source.html"

    def __init__(self, source_dir: Path, player_id: Optional[int] = None):
        """
        Args:
            source_dir: Directory the document is written to
            player_id: When given, the file name carries the id so that
                concurrent players do not overwrite each other's document
        """
        if player_id is None:
            filename = self.FILENAME
        else:
            filename = f"source-{player_id}.html"
        self.path = Path(source_dir) / filename

    @property
    def uri(self) -> str:
        return "file://" + str(self.path.resolve())

    def write(self) -> Path:
        """Write the document, replacing any previous copy."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(PLAYER_SOURCE, encoding="utf-8")
        except OSError as e:
            raise SurfaceError(f"Cannot write player document {self.path}: {e}") from e
        logger.debug("Player document written to %s", self.path)
        return self.path
