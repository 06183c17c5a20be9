"""Cache lookup.

Resolves an ordered list of key prefixes within a key space to a stored
entry. Precedence among several matching entries (exact key first, then the
most recent prefix match, in the order the prefixes were given) is decided by
the service; the client passes the prefixes through untouched.
"""

from __future__ import annotations

from collections.abc import Sequence

from actions_cache.cache.classifier import classify_response, decode_body
from actions_cache.cache.models import CacheEntry, CacheHit
from actions_cache.cache.schemas import GetCacheResponse
from actions_cache.core.constants import KEY_DELIMITER, Route
from actions_cache.core.http import Transport
from actions_cache.core.logging import get_logger


logger = get_logger(__name__)


def join_key_prefixes(key_prefixes: Sequence[str]) -> str:
    """Join prefixes into the ``keys`` query value, preserving order.

    Raises:
        ValueError: if no prefixes are given, or a prefix is empty or
            contains the delimiter
    """
    if isinstance(key_prefixes, str):
        raise ValueError("key_prefixes must be a sequence of keys, not a string")
    if not key_prefixes:
        raise ValueError("at least one key prefix is required")
    for prefix in key_prefixes:
        if not prefix:
            raise ValueError("key prefixes must not be empty")
        if KEY_DELIMITER in prefix:
            raise ValueError(f"key prefix must not contain {KEY_DELIMITER!r}: {prefix!r}")
    return KEY_DELIMITER.join(key_prefixes)


class LookupProtocol:
    """Cache lookup and download over a shared ``Transport``."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self._logger = logger.bind(client_label=transport.config.client_label)

    async def get_url(
        self,
        key_space: str,
        key_prefixes: Sequence[str],
    ) -> CacheEntry | None:
        """Look up an entry and return where to download it.

        Args:
            key_space: Namespace/version identifier, must match exactly.
            key_prefixes: Key prefixes in order of preference.

        Returns:
            The matched entry, or None when nothing matches (HTTP 204).

        Raises:
            CacheError: RATE_LIMITED or TRANSPORT
            ValueError: if ``key_prefixes`` is empty or malformed
        """
        keys = join_key_prefixes(key_prefixes)
        request = self._transport.build_api_request(
            "GET",
            Route.CACHE.value,
            params={"keys": keys, "version": key_space},
        )
        response = await self._transport.send(request)

        if response.status_code == 204:
            self._logger.debug("Cache miss", key_space=key_space, keys=keys)
            return None

        body = decode_body(response, GetCacheResponse)
        self._logger.debug(
            "Cache hit", key_space=key_space, key=body.cache_key, scope=body.scope
        )
        return CacheEntry(
            hit=CacheHit(key=body.cache_key, scope=body.scope),
            archive_location=body.archive_location,
        )

    async def download(self, archive_location: str) -> bytes:
        """Fetch an archive from its pre-signed location.

        The location carries its own authorization, so no API headers are
        added.

        Raises:
            CacheError: RATE_LIMITED or TRANSPORT
        """
        request = self._transport.build_request("GET", archive_location)
        response = classify_response(await self._transport.send(request))
        return response.content

    async def get_bytes(
        self,
        key_space: str,
        key_prefixes: Sequence[str],
    ) -> tuple[CacheHit, bytes] | None:
        """Look up an entry and download its content.

        See ``get_url`` for the lookup semantics.

        Returns:
            ``(hit, data)``, or None when nothing matches.
        """
        entry = await self.get_url(key_space, key_prefixes)
        if entry is None:
            return None
        data = await self.download(entry.archive_location)
        return entry.hit, data
