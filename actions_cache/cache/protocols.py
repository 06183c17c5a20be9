"""Cache client protocol.

Duck-typing protocol for the cache client so callers can accept either the
real ``CacheClient`` or an in-memory fake in tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from actions_cache.cache.models import CacheEntry, CacheHit


@runtime_checkable
class CacheClientProtocol(Protocol):
    """Interface shared by ``CacheClient`` and its test doubles.

    Methods:
        get_url: Look up an entry and return its download location
        get_bytes: Look up an entry and return its content
        put_bytes: Store an entry
        close: Release connection resources
    """

    async def get_url(
        self, key_space: str, key_prefixes: Sequence[str]
    ) -> CacheEntry | None:
        ...

    async def get_bytes(
        self, key_space: str, key_prefixes: Sequence[str]
    ) -> tuple[CacheHit, bytes] | None:
        ...

    async def put_bytes(
        self, key_space: str, key: str, data: bytes | bytearray | memoryview
    ) -> None:
        ...

    async def close(self) -> None:
        ...
