"""Artifact cache protocol package.

- lookup: resolve key prefixes to an entry and download it
- store: reserve, upload and finalize an entry
- classifier: map HTTP responses to typed errors
- client: the ``CacheClient`` façade
"""

from actions_cache.cache.classifier import (
    classify_response,
    decode_body,
    parse_retry_after,
)
from actions_cache.cache.client import CacheClient
from actions_cache.cache.lookup import LookupProtocol, join_key_prefixes
from actions_cache.cache.models import CacheEntry, CacheHit, CacheReservation
from actions_cache.cache.protocols import CacheClientProtocol
from actions_cache.cache.store import StoreProtocol


__all__ = [
    # Models
    "CacheEntry",
    "CacheHit",
    "CacheReservation",
    # Client
    "CacheClient",
    "CacheClientProtocol",
    # Protocol steps
    "LookupProtocol",
    "StoreProtocol",
    # Classification
    "classify_response",
    "decode_body",
    "join_key_prefixes",
    "parse_retry_after",
]
