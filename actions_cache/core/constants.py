"""Artifact cache service constants.

Provides centralized constants for the cache wire protocol:
- API path and media types
- Header values sent on authenticated requests
- Environment variable names exported by the build runner
"""

from enum import Enum


# =============================================================================
# Wire Protocol
# =============================================================================

# Appended to the configured endpoint; every API route lives below it.
API_PATH = "/_apis/artifactcache"

API_VERSION = "6.0-preview.1"

# Versioned JSON media type pinned on every authenticated request.
ACCEPT_MEDIA_TYPE = f"application/json;api-version={API_VERSION}"

OCTET_STREAM = "application/octet-stream"

# Separator between key prefixes in the lookup query string.
KEY_DELIMITER = ","


class Route(str, Enum):
    """API routes relative to API_PATH."""

    CACHE = "/cache"
    CACHES = "/caches"

    def for_id(self, cache_id: int) -> str:
        """Return the per-reservation route below this collection."""
        return f"{self.value}/{cache_id}"


def content_range(length: int) -> str:
    """Build the Content-Range header for a single-shot upload.

    The total size is unknown to the server at upload time, hence ``*``.

    Args:
        length: Payload length in bytes, must be positive.

    Returns:
        Header value in the form ``bytes 0-<length-1>/*``.
    """
    if length < 1:
        raise ValueError("Content-Range requires a non-empty payload")
    return f"bytes 0-{length - 1}/*"


# =============================================================================
# Runner Environment
# =============================================================================

ENV_RUNTIME_TOKEN = "ACTIONS_RUNTIME_TOKEN"
ENV_CACHE_URL = "ACTIONS_CACHE_URL"

# Prefix for the library's own tuning knobs.
ENV_PREFIX = "ACTIONS_CACHE_"

DEFAULT_CLIENT_LABEL = "actions-cache-python"
