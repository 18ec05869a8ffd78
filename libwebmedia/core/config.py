"""Configuration management using XDG Base Directory Specification.

This module provides centralized configuration management following Linux
standards for config, cache, and data directories.
"""

import configparser
import os
import tempfile
from pathlib import Path
from typing import Optional, Tuple

from libwebmedia.core.exceptions import ConfigurationError


class Config:
    """
    Configuration manager using XDG Base Directory Specification.

    Follows Linux standards:
    - Config: ~/.config/libwebmedia/ (or XDG_CONFIG_HOME)
    - Cache: ~/.cache/libwebmedia/ (or XDG_CACHE_HOME)
    - Data: ~/.local/share/libwebmedia/ (or XDG_DATA_HOME)
    """

    _instance: Optional['Config'] = None

    def __init__(self) -> None:
        self.config_home = Path(os.getenv('XDG_CONFIG_HOME', Path.home() / '.config'))
        self.cache_home = Path(os.getenv('XDG_CACHE_HOME', Path.home() / '.cache'))
        self.data_home = Path(os.getenv('XDG_DATA_HOME', Path.home() / '.local' / 'share'))

        self.app_name = 'libwebmedia'
        self.config_dir = self.config_home / self.app_name
        self.cache_dir = self.cache_home / self.app_name
        self.data_dir = self.data_home / self.app_name

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.config_file = self.config_dir / 'config.ini'
        self.config = configparser.ConfigParser()

        self._load_config()

    @classmethod
    def get_instance(cls) -> 'Config':
        """Get the singleton config instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def _load_config(self) -> None:
        """Load configuration from file or create defaults."""
        self._apply_defaults()
        if self.config_file.exists():
            try:
                self.config.read(self.config_file)
            except configparser.Error as e:
                raise ConfigurationError(f"Cannot parse {self.config_file}: {e}") from e
        else:
            self.save()

    def _apply_defaults(self) -> None:
        """Fill in default values for every known section."""
        self.config['player'] = {
            'window_title': 'libwebmedia',
            'window_width': '480',
            'window_height': '360',
            'show_window': 'false',
            'ready_timeout': '0',  # seconds, 0 waits forever
        }

        self.config['document'] = {
            'source_dir': tempfile.gettempdir(),
            'per_instance': 'false',
        }

    def save(self) -> None:
        """Write current configuration state to the config file."""
        try:
            with open(self.config_file, 'w') as f:
                self.config.write(f)
        except OSError as e:
            from libwebmedia.core.logging import get_logger
            logger = get_logger(__name__)
            logger.error("Failed to save config: %s", e, exc_info=True)

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """Get a configuration value."""
        return self.config.get(section, key, fallback=fallback)

    def set(self, section: str, key: str, value: str) -> None:
        """
        Set a configuration value.

        Args:
            section: Configuration section name
            key: Configuration key name
            value: Value to set
        """
        if section not in self.config:
            self.config.add_section(section)
        self.config.set(section, key, value)
        self.save()

    def get_bool(self, section: str, key: str, fallback: bool = False) -> bool:
        """Get a boolean configuration value."""
        try:
            return self.config.getboolean(section, key, fallback=fallback)
        except ValueError as e:
            raise ConfigurationError(f"[{section}] {key}: {e}") from e

    def get_int(self, section: str, key: str, fallback: int = 0) -> int:
        """Get an integer configuration value."""
        try:
            return self.config.getint(section, key, fallback=fallback)
        except ValueError as e:
            raise ConfigurationError(f"[{section}] {key}: {e}") from e

    def get_float(self, section: str, key: str, fallback: float = 0.0) -> float:
        """Get a float configuration value."""
        try:
            return self.config.getfloat(section, key, fallback=fallback)
        except ValueError as e:
            raise ConfigurationError(f"[{section}] {key}: {e}") from e

    def get_path(self, section: str, key: str, fallback: Optional[Path] = None) -> Optional[Path]:
        """Get a path configuration value."""
        value = self.get(section, key)
        if value:
            return Path(value).expanduser()
        return fallback

    # Convenience properties
    @property
    def window_title(self) -> str:
        return self.get('player', 'window_title', 'libwebmedia') or 'libwebmedia'

    @property
    def window_size(self) -> Tuple[int, int]:
        """Get the initial (width, height) of the player window."""
        width = self.get_int('player', 'window_width', 480)
        height = self.get_int('player', 'window_height', 360)
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Invalid window size {width}x{height}")
        return width, height

    @property
    def show_window(self) -> bool:
        return self.get_bool('player', 'show_window', False)

    @property
    def ready_timeout(self) -> Optional[float]:
        """Seconds to wait for the surface to become ready, None for no limit."""
        timeout = self.get_float('player', 'ready_timeout', 0.0)
        if timeout < 0:
            raise ConfigurationError(f"ready_timeout must not be negative: {timeout}")
        return timeout or None

    @property
    def source_dir(self) -> Path:
        """Get the directory the player document is written to."""
        return self.get_path('document', 'source_dir', Path(tempfile.gettempdir()))

    @property
    def per_instance_source(self) -> bool:
        return self.get_bool('document', 'per_instance', False)

    @property
    def log_dir(self) -> Path:
        """Get log directory."""
        log_dir = self.data_dir / 'logs'
        log_dir.mkdir(parents=True, exist_ok=True)
        return log_dir


# Convenience function
def get_config() -> Config:
    """Get the configuration instance."""
    return Config.get_instance()
