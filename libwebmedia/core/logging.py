"""Package logger for libwebmedia.

Every module logs through a child of the ``libwebmedia`` logger. Records carry
the thread name because the render loop and control threads log side by side.
Warnings go to stderr; everything at the configured level goes to a rotating
file under the XDG data directory (or the configured log_dir).
"""

# ============================================================================
# Standard Library Imports (alphabetical)
# ============================================================================
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

# ============================================================================
# Third-Party Imports (alphabetical, with version requirements)
# ============================================================================
# None

# ============================================================================
# Local Imports (grouped by package, alphabetical)
# ============================================================================
# None

ROOT_LOGGER_NAME = "libwebmedia"


class LinuxLogger:
    """
    Configures the ``libwebmedia`` logger once per process.

    Embedding applications that already attached handlers keep them; nothing
    is added in that case. Set LIBWEBMEDIA_DEBUG to log notification parsing
    and status transitions.
    """

    _instance: Optional["LinuxLogger"] = None
    _initialized: bool = False

    def __init__(self, log_dir: Optional[Path] = None):
        """
        Attach the stderr and file handlers unless already configured.

        Args:
            log_dir: Directory for libwebmedia.log (defaults to
                $XDG_DATA_HOME/libwebmedia/logs)
        """
        self.logger = logging.getLogger(ROOT_LOGGER_NAME)
        if LinuxLogger._initialized:
            return

        self.logger.setLevel(
            logging.DEBUG if os.getenv("LIBWEBMEDIA_DEBUG") else logging.INFO
        )

        # Host application configured the logger itself
        if self.logger.handlers:
            LinuxLogger._initialized = True
            return

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s (%(threadName)s): %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        # Console handler (stderr)
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_dir is None:
            xdg_data = os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share")
            log_dir = Path(xdg_data) / "libwebmedia" / "logs"

        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "libwebmedia.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=5 * 1024 * 1024, backupCount=3  # 5MB
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)

        LinuxLogger._initialized = True

    @classmethod
    def get_logger(cls, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
        """
        Return the package logger or one of its children.

        Args:
            name: Module name such as ``libwebmedia.core.controller``; the
                package prefix is dropped before creating the child

        Returns:
            Logger under ``libwebmedia``
        """
        if cls._instance is None:
            cls._instance = cls()

        if name == ROOT_LOGGER_NAME:
            return cls._instance.logger
        # Module names already carry the package prefix
        if name.startswith(ROOT_LOGGER_NAME + "."):
            name = name[len(ROOT_LOGGER_NAME) + 1:]
        return cls._instance.logger.getChild(name)

    @classmethod
    def set_level(cls, level: int) -> None:
        """
        Change the level of every libwebmedia logger at once.

        Args:
            level: Logging level (logging.DEBUG, logging.INFO, etc.)
        """
        if cls._instance is None:
            cls._instance = cls()
        cls._instance.logger.setLevel(level)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Logger for a libwebmedia module, usually called with ``__name__``."""
    return LinuxLogger.get_logger(name)
