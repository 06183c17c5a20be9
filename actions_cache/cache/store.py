"""Cache store transaction.

Storing an entry takes three strictly sequential requests:

1. reserve  - ``POST /caches`` with ``{key, version}``, yields a cache id
2. upload   - ``PATCH /caches/<id>`` with the whole payload in one request,
              skipped for an empty payload
3. finalize - ``POST /caches/<id>`` with ``{size}``

The store has succeeded only once finalize returns 2xx. A failure in any
phase aborts the store; the reservation is left for the service to expire
and no compensating request is sent.
"""

from __future__ import annotations

from actions_cache.cache.classifier import classify_response, decode_body
from actions_cache.cache.models import CacheReservation
from actions_cache.cache.schemas import (
    CommitCacheRequest,
    ReserveCacheRequest,
    ReserveCacheResponse,
)
from actions_cache.core.constants import OCTET_STREAM, Route, content_range
from actions_cache.core.http import Transport
from actions_cache.core.logging import get_logger


logger = get_logger(__name__)

Payload = bytes | bytearray | memoryview


class StoreProtocol:
    """Three-phase cache write over a shared ``Transport``.

    The individual phases are exposed for callers that need finer control;
    ``put_bytes`` runs them in order and is what ``CacheClient`` uses.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self._logger = logger.bind(client_label=transport.config.client_label)

    async def reserve(self, key_space: str, key: str) -> CacheReservation:
        """Reserve a cache id for ``key`` in ``key_space``.

        Raises:
            CacheError: RATE_LIMITED or TRANSPORT (e.g. the key is already
                being stored by another job)
        """
        body = ReserveCacheRequest(key=key, version=key_space)
        request = self._transport.build_api_request(
            "POST",
            Route.CACHES.value,
            json=body.model_dump(),
        )
        response = await self._transport.send(request)
        reserved = decode_body(response, ReserveCacheResponse)

        self._logger.debug("Reserved cache entry", cache_id=reserved.cache_id, key=key)
        return CacheReservation(id=reserved.cache_id, key=key, version=key_space)

    async def upload(self, reservation: CacheReservation, data: bytes) -> None:
        """Upload the full payload for a reservation in a single request.

        Raises:
            ValueError: if ``data`` is empty; empty payloads skip upload
            CacheError: RATE_LIMITED or TRANSPORT
        """
        request = self._transport.build_api_request(
            "PATCH",
            Route.CACHES.for_id(reservation.id),
            content=data,
            headers={
                "Content-Range": content_range(len(data)),
                "Content-Type": OCTET_STREAM,
            },
        )
        classify_response(await self._transport.send(request))

        self._logger.debug("Uploaded cache entry", cache_id=reservation.id, size=len(data))

    async def finalize(self, reservation: CacheReservation, size: int) -> None:
        """Commit the reservation as a retrievable entry.

        ``size`` must equal the number of bytes uploaded; the service rejects
        a mismatch.

        Raises:
            CacheError: RATE_LIMITED or TRANSPORT
        """
        body = CommitCacheRequest(size=size)
        request = self._transport.build_api_request(
            "POST",
            Route.CACHES.for_id(reservation.id),
            json=body.model_dump(),
        )
        classify_response(await self._transport.send(request))

        self._logger.debug("Finalized cache entry", cache_id=reservation.id, size=size)

    async def put_bytes(self, key_space: str, key: str, data: Payload) -> None:
        """Store ``data`` under ``key`` in ``key_space``.

        Returns only after finalize succeeds. Any earlier failure propagates
        and the entry is not stored.

        Args:
            key_space: Namespace/version identifier used for later lookups.
            key: Full key to store under.
            data: Payload. A zero-length payload is stored without an upload.

        Raises:
            CacheError: RATE_LIMITED or TRANSPORT from whichever phase failed
        """
        payload = bytes(data)

        reservation = await self.reserve(key_space, key)
        if payload:
            await self.upload(reservation, payload)
        await self.finalize(reservation, len(payload))

        self._logger.info(
            "Stored cache entry",
            key_space=key_space,
            key=key,
            cache_id=reservation.id,
            size=len(payload),
        )
