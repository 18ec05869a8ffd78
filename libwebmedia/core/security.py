"""Security utilities for media URI validation and script quoting."""

# ============================================================================
# Standard Library Imports (alphabetical)
# ============================================================================
import json
import re
from pathlib import Path
from typing import Optional

# ============================================================================
# Local Imports (grouped by package, alphabetical)
# ============================================================================
from libwebmedia.core.exceptions import SecurityError
from libwebmedia.core.logging import get_logger

logger = get_logger(__name__)


class SecurityValidator:
    """Security validation utilities."""

    # Schemes the media element may be pointed at
    ALLOWED_SCHEMES = {"file", "http", "https", "blob", "data"}

    SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")

    # Control characters other than tab never belong in a URI
    CONTROL_CHARS = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")

    MAX_URI_LENGTH = 8192

    @staticmethod
    def validate_media_uri(uri: str) -> str:
        """
        Validate a media URI before it is handed to the rendering surface.

        Args:
            uri: URI, absolute path, or reference relative to the player
                document

        Returns:
            The URI unchanged if valid

        Raises:
            SecurityError: The URI is empty, too long, contains control
                characters or uses a scheme other than ALLOWED_SCHEMES.
        """
        if not isinstance(uri, str) or not uri.strip():
            raise SecurityError("Empty media URI")

        if len(uri) > SecurityValidator.MAX_URI_LENGTH:
            raise SecurityError(f"Media URI longer than {SecurityValidator.MAX_URI_LENGTH} characters")

        if SecurityValidator.CONTROL_CHARS.search(uri):
            logger.warning("Security: Control characters in media URI: %r", uri)
            raise SecurityError("Control characters in media URI")

        match = SecurityValidator.SCHEME_PATTERN.match(uri)
        if match:
            scheme = match.group(1).lower()
            if scheme not in SecurityValidator.ALLOWED_SCHEMES:
                logger.warning("Security: Rejected media URI scheme %s", scheme)
                raise SecurityError(f"Unsupported media URI scheme: {scheme}")

        return uri

    @staticmethod
    def script_string_literal(value: str) -> str:
        """
        Quote a value for use as a string literal inside an injected script.

        Quotes, backslashes and line separators are escaped so the value can
        never terminate the surrounding statement. Non-ASCII characters are
        emitted as escapes, which also covers U+2028/U+2029.
        """
        return json.dumps(value, ensure_ascii=True)

    @staticmethod
    def path_to_media_uri(path: str) -> Optional[str]:
        """
        Turn a local path or URI given on the command line into a media URI.

        Args:
            path: Absolute/relative file path or a URI

        Returns:
            ``file://`` URI for existing local files, the input for URIs,
            None when the file does not exist
        """
        if SecurityValidator.SCHEME_PATTERN.match(path) and not Path(path).exists():
            return path
        try:
            resolved = Path(path).expanduser().resolve()
        except (OSError, RuntimeError) as e:
            logger.debug("Failed to resolve path %s: %s", path, e)
            return None
        if not resolved.is_file():
            logger.warning("Media file not found: %s", path)
            return None
        # The document runs encodeURI over the source, so the path stays unescaped
        return "file://" + str(resolved)
