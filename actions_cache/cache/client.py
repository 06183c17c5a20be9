"""Artifact cache client.

``CacheClient`` is the public entry point. It owns one ``ClientConfig`` and
one pooled transport, and exposes lookup, download and store. It keeps no
state between calls besides the connection pool, so a single instance can
serve many concurrent operations.

Concurrent stores of the same key are not coordinated here; the service
decides which reservation wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from types import TracebackType

import httpx

from actions_cache.cache.lookup import LookupProtocol
from actions_cache.cache.models import CacheEntry, CacheHit
from actions_cache.cache.store import Payload, StoreProtocol
from actions_cache.core.config import ClientConfig, Settings
from actions_cache.core.http import Transport
from actions_cache.core.logging import get_logger


logger = get_logger(__name__)


class CacheClient:
    """Client for the artifact cache service.

    Example:
        ```python
        config = ClientConfig(token=token, endpoint=url, client_label="my-ci")
        async with CacheClient(config) as cache:
            await cache.put_bytes(key_space, "deps-linux-abc123", archive)
            found = await cache.get_bytes(key_space, ["deps-linux-abc123", "deps-linux-"])
            if found is not None:
                hit, data = found
        ```
    """

    def __init__(
        self,
        config: ClientConfig,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Validated client configuration.
            http_transport: Optional httpx transport override.
        """
        self._config = config
        self._transport = Transport(config, http_transport)
        self._lookup = LookupProtocol(self._transport)
        self._store = StoreProtocol(self._transport)
        self._logger = logger.bind(client_label=config.client_label)

        self._logger.debug("Created cache client", api_base_url=config.api_base_url)

    @classmethod
    def from_env(
        cls,
        settings: Settings | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> CacheClient:
        """Create a client from the runner's environment variables.

        Raises:
            CacheError: kind CONFIGURATION if the token or endpoint is missing
        """
        return cls(ClientConfig.from_env(settings), http_transport)

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def get_url(
        self,
        key_space: str,
        key_prefixes: Sequence[str],
    ) -> CacheEntry | None:
        """Perform a cache lookup and return the URL for a matching entry.

        Args:
            key_space: Identifier (usually a hex digest) that must match exactly.
            key_prefixes: Key prefixes to look up, in order of preference.

        Returns:
            ``CacheEntry`` (unpacks as ``hit, location``) or None on a miss.
        """
        return await self._lookup.get_url(key_space, key_prefixes)

    async def get_bytes(
        self,
        key_space: str,
        key_prefixes: Sequence[str],
    ) -> tuple[CacheHit, bytes] | None:
        """Perform a cache lookup and return the content of a matching entry.

        See ``get_url`` for details about the lookup.
        """
        return await self._lookup.get_bytes(key_space, key_prefixes)

    async def put_bytes(self, key_space: str, key: str, data: Payload) -> None:
        """Store an entry in the cache.

        Raises:
            CacheError: if any of reserve, upload or finalize fails
        """
        await self._store.put_bytes(key_space, key, data)

    async def close(self) -> None:
        """Close the connection pool."""
        await self._transport.aclose()

    async def __aenter__(self) -> CacheClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
