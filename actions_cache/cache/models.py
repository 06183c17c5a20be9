"""Domain objects returned by the cache client.

All are immutable and live no longer than the call that produced them.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheHit:
    """Metadata for a cache hit.

    Attributes:
        key: The full key under which the found entry was stored. May differ
            from the requested prefix when the match was by prefix.
        scope: The scope that stored the entry (usually a branch ref).
    """

    key: str
    scope: str


@dataclass(frozen=True)
class CacheEntry:
    """A lookup result: hit metadata plus where to download it.

    ``archive_location`` is a pre-signed URL valid for a single short-lived
    download. Do not persist it.
    """

    hit: CacheHit
    archive_location: str

    def __iter__(self):
        # Allows ``hit, location = entry``.
        yield self.hit
        yield self.archive_location


@dataclass(frozen=True)
class CacheReservation:
    """Server-issued id for an in-progress store.

    Only meaningful until finalize. A reservation that is never finalized
    is left to the server to expire.
    """

    id: int
    key: str
    version: str
