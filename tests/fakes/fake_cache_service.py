"""Fake artifact cache service for unit testing.

In-memory implementation of the cache wire protocol served through
``httpx.MockTransport``. Implements lookup, reserve, upload, finalize and
archive download closely enough to exercise the client end to end, and
records every request for verification.

Example:
    >>> service = FakeCacheService()
    >>> client = CacheClient(config, http_transport=service.transport())
    >>> await client.put_bytes("v1", "deps-abc", b"data")
    >>> assert service.requests_for("PATCH")[0].headers["Content-Range"] == "bytes 0-3/*"
"""

from __future__ import annotations

import itertools
import json
import re
from dataclasses import dataclass, field
from urllib.parse import urlsplit

import httpx


API_HOST = "cache.test"
BLOB_HOST = "blobs.test"
API_ROOT = "/_apis/artifactcache"
TOKEN = "test-runtime-token"
ACCEPT = "application/json;api-version=6.0-preview.1"

_CONTENT_RANGE = re.compile(r"^bytes (\d+)-(\d+)/\*$")
_CACHE_ID_PATH = re.compile(rf"^{API_ROOT}/caches/(\d+)$")


@dataclass
class StoredEntry:
    """A finalized cache entry."""

    key: str
    version: str
    scope: str
    data: bytes
    archive_id: int
    sequence: int


@dataclass
class PendingReservation:
    """A reservation that has not been finalized yet."""

    cache_id: int
    key: str
    version: str
    data: bytearray = field(default_factory=bytearray)


@dataclass
class InjectedFailure:
    """Response to return instead of handling a matching request."""

    status_code: int
    headers: dict[str, str]
    method: str | None
    body: bytes


class FakeCacheService:
    """In-memory artifact cache service.

    Attributes:
        requests: Every request received, in order
        entries: Finalized entries
        reservations: Reservations awaiting finalize
    """

    def __init__(self, token: str = TOKEN, scope: str = "refs/heads/main") -> None:
        self.token = token
        self.scope = scope
        self.requests: list[httpx.Request] = []
        self.entries: list[StoredEntry] = []
        self.reservations: dict[int, PendingReservation] = {}
        self._failures: list[InjectedFailure] = []
        self._ids = itertools.count(1)
        self._sequence = itertools.count(1)

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def transport(self) -> httpx.MockTransport:
        """Return an httpx transport backed by this service."""
        return httpx.MockTransport(self.handle)

    def seed(self, version: str, key: str, data: bytes, scope: str | None = None) -> StoredEntry:
        """Insert a finalized entry directly."""
        entry = StoredEntry(
            key=key,
            version=version,
            scope=scope or self.scope,
            data=bytes(data),
            archive_id=next(self._ids),
            sequence=next(self._sequence),
        )
        self.entries.append(entry)
        return entry

    def fail_next(
        self,
        status_code: int,
        headers: dict[str, str] | None = None,
        method: str | None = None,
        body: bytes = b"",
    ) -> None:
        """Answer the next request (optionally only of ``method``) with an error."""
        self._failures.append(
            InjectedFailure(status_code, headers or {}, method, body)
        )

    def requests_for(self, method: str, path_suffix: str = "") -> list[httpx.Request]:
        """Recorded requests filtered by method and path suffix."""
        return [
            r
            for r in self.requests
            if r.method == method and r.url.path.endswith(path_suffix)
        ]

    def archive_url(self, entry: StoredEntry) -> str:
        return f"https://{BLOB_HOST}/archives/{entry.archive_id}?sig=signed"

    # -------------------------------------------------------------------------
    # Request handling
    # -------------------------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        for i, failure in enumerate(self._failures):
            if failure.method is None or failure.method == request.method:
                del self._failures[i]
                return httpx.Response(
                    failure.status_code,
                    headers=failure.headers,
                    content=failure.body,
                )

        if request.url.host == BLOB_HOST:
            return self._download(request)

        if request.url.host != API_HOST:
            return httpx.Response(404)
        if request.headers.get("Authorization") != f"Bearer {self.token}":
            return httpx.Response(401, json={"message": "unauthorized"})
        if request.headers.get("Accept") != ACCEPT:
            return httpx.Response(406, json={"message": "unsupported api version"})

        path = request.url.path
        if request.method == "GET" and path == f"{API_ROOT}/cache":
            return self._lookup(request)
        if request.method == "POST" and path == f"{API_ROOT}/caches":
            return self._reserve(request)

        match = _CACHE_ID_PATH.match(path)
        if match:
            cache_id = int(match.group(1))
            if request.method == "PATCH":
                return self._upload(request, cache_id)
            if request.method == "POST":
                return self._finalize(request, cache_id)

        return httpx.Response(404, json={"message": f"no route {request.method} {path}"})

    def _lookup(self, request: httpx.Request) -> httpx.Response:
        keys = request.url.params.get("keys", "")
        version = request.url.params.get("version")
        if not keys or version is None:
            return httpx.Response(400, json={"message": "keys and version are required"})

        candidates = [e for e in self.entries if e.version == version]
        for prefix in keys.split(","):
            exact = [e for e in candidates if e.key == prefix]
            matches = exact or [e for e in candidates if e.key.startswith(prefix)]
            if matches:
                entry = max(matches, key=lambda e: e.sequence)
                return httpx.Response(
                    200,
                    json={
                        "cacheKey": entry.key,
                        "scope": entry.scope,
                        "archiveLocation": self.archive_url(entry),
                        "creationTime": "2024-01-01T00:00:00Z",
                    },
                )
        return httpx.Response(204)

    def _reserve(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        key, version = body["key"], body["version"]

        taken = any(e.key == key and e.version == version for e in self.entries) or any(
            r.key == key and r.version == version for r in self.reservations.values()
        )
        if taken:
            return httpx.Response(
                409, json={"message": f"Cache already exists. Key: {key}"}
            )

        cache_id = next(self._ids)
        self.reservations[cache_id] = PendingReservation(cache_id, key, version)
        return httpx.Response(201, json={"cacheId": cache_id})

    def _upload(self, request: httpx.Request, cache_id: int) -> httpx.Response:
        reservation = self.reservations.get(cache_id)
        if reservation is None:
            return httpx.Response(404, json={"message": "unknown cache id"})
        if request.headers.get("Content-Type") != "application/octet-stream":
            return httpx.Response(415)

        match = _CONTENT_RANGE.match(request.headers.get("Content-Range", ""))
        if not match:
            return httpx.Response(400, json={"message": "invalid Content-Range"})
        start, end = int(match.group(1)), int(match.group(2))
        if end - start + 1 != len(request.content):
            return httpx.Response(400, json={"message": "Content-Range does not match body"})

        data = reservation.data
        if len(data) < end + 1:
            data.extend(b"\0" * (end + 1 - len(data)))
        data[start : end + 1] = request.content
        return httpx.Response(204)

    def _finalize(self, request: httpx.Request, cache_id: int) -> httpx.Response:
        reservation = self.reservations.get(cache_id)
        if reservation is None:
            return httpx.Response(404, json={"message": "unknown cache id"})

        size = json.loads(request.content)["size"]
        if size != len(reservation.data):
            return httpx.Response(
                400,
                json={"message": f"size {size} does not match uploaded {len(reservation.data)}"},
            )

        del self.reservations[cache_id]
        self.entries.append(
            StoredEntry(
                key=reservation.key,
                version=reservation.version,
                scope=self.scope,
                data=bytes(reservation.data),
                archive_id=next(self._ids),
                sequence=next(self._sequence),
            )
        )
        return httpx.Response(204)

    def _download(self, request: httpx.Request) -> httpx.Response:
        archive_id = urlsplit(str(request.url)).path.rsplit("/", 1)[-1]
        for entry in self.entries:
            if str(entry.archive_id) == archive_id:
                return httpx.Response(
                    200,
                    content=entry.data,
                    headers={"Content-Type": "application/octet-stream"},
                )
        return httpx.Response(404)
