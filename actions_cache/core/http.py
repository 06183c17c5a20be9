"""HTTP transport for the artifact cache service.

Wraps one pooled ``httpx.AsyncClient`` shared by every operation of a
``CacheClient``. The transport knows how to authenticate an API request and
how to send it; it never retries and never interprets status codes (see
``actions_cache.cache.classifier`` for that).
"""

from __future__ import annotations

from typing import Any

import httpx

from actions_cache.core.config import ClientConfig
from actions_cache.core.constants import ACCEPT_MEDIA_TYPE
from actions_cache.core.exceptions import CacheError
from actions_cache.core.logging import get_logger


logger = get_logger(__name__)


class Transport:
    """Authenticated request builder over a reusable connection pool.

    The pool is created once per transport and is safe to share between
    concurrent tasks. API routes are resolved against
    ``ClientConfig.api_base_url``; absolute URLs (pre-signed archive
    locations) bypass it.

    Example:
        ```python
        transport = Transport(config)
        request = transport.build_api_request("GET", "/cache", params=params)
        response = await transport.send(request)
        await transport.aclose()
        ```
    """

    def __init__(
        self,
        config: ClientConfig,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Client configuration supplying token, endpoint and label.
            http_transport: Optional httpx transport override (tests, proxies).
        """
        self._config = config
        self._logger = logger.bind(client_label=config.client_label)
        self._client = httpx.AsyncClient(
            base_url=config.api_base_url,
            headers={"User-Agent": config.client_label},
            timeout=httpx.Timeout(config.timeout),
            transport=http_transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def client(self) -> httpx.AsyncClient:
        """Underlying pooled client."""
        return self._client

    def api_request(self, request: httpx.Request) -> httpx.Request:
        """Add the authorization and accept headers needed for an API request.

        Args:
            request: Unauthenticated request.

        Returns:
            The same request, mutated in place.
        """
        request.headers["Authorization"] = f"Bearer {self._config.token}"
        request.headers["Accept"] = ACCEPT_MEDIA_TYPE
        return request

    def build_request(self, method: str, url: str, **kwargs: Any) -> httpx.Request:
        """Build a request without API credentials."""
        return self._client.build_request(method, url, **kwargs)

    def build_api_request(self, method: str, path: str, **kwargs: Any) -> httpx.Request:
        """Build an authenticated request for an API route."""
        return self.api_request(self.build_request(method, path, **kwargs))

    async def send(self, request: httpx.Request) -> httpx.Response:
        """Send a request and read its body.

        No retries and no status interpretation happen here.

        Raises:
            CacheError: kind TRANSPORT on connection, timeout or protocol failure
        """
        try:
            response = await self._client.send(request)
        except httpx.HTTPError as e:
            raise CacheError.transport(
                f"{request.method} {request.url.path} failed: {e}",
                url=str(request.url),
                cause=e,
            ) from e

        self._logger.debug(
            "Cache service response",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            response_headers=dict(response.headers),
        )
        return response

    async def aclose(self) -> None:
        """Close the connection pool."""
        await self._client.aclose()
