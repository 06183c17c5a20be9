"""Core module - Configuration, logging, HTTP transport, and errors.

Exports:
    - ClientConfig, Settings, get_settings: Client configuration
    - configure_logging, get_logger: Structured logging (structlog)
    - Transport: Authenticated httpx transport
    - CacheError, CacheErrorKind: Tagged error type
"""

from actions_cache.core.config import ClientConfig, Settings, get_settings
from actions_cache.core.constants import (
    ACCEPT_MEDIA_TYPE,
    API_PATH,
    API_VERSION,
    DEFAULT_CLIENT_LABEL,
    Route,
    content_range,
)
from actions_cache.core.exceptions import CacheError, CacheErrorKind
from actions_cache.core.http import Transport
from actions_cache.core.logging import configure_logging, get_logger


__all__ = [
    # Constants
    "ACCEPT_MEDIA_TYPE",
    "API_PATH",
    "API_VERSION",
    "DEFAULT_CLIENT_LABEL",
    # Errors
    "CacheError",
    "CacheErrorKind",
    # Configuration
    "ClientConfig",
    "Route",
    "Settings",
    # Transport
    "Transport",
    # Logging
    "configure_logging",
    "content_range",
    "get_logger",
    "get_settings",
]
