"""Response classification.

Turns completed HTTP responses into either the response itself (2xx) or a
typed ``CacheError``. Classification always runs before any attempt to decode
a body, since error bodies need not match the success schema.
"""

from __future__ import annotations

from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from actions_cache.core.exceptions import CacheError
from actions_cache.core.logging import get_logger


logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_retry_after(value: str | None) -> int | None:
    """Parse a Retry-After header given as a non-negative integer of seconds.

    A single leading "+" is accepted. HTTP-date values, negative or
    fractional numbers are not understood and yield None.

    Args:
        value: Raw header value, or None if the header is absent.

    Returns:
        Seconds to wait, or None.
    """
    if value is None:
        return None
    candidate = value.strip()
    if candidate.startswith("+"):
        candidate = candidate[1:]
    if not candidate or not (candidate.isascii() and candidate.isdigit()):
        return None
    return int(candidate)


def classify_response(response: httpx.Response) -> httpx.Response:
    """Pass a successful response through, raise a typed error otherwise.

    Rate-limit detection is intentional: any 4xx/5xx carrying a parseable
    Retry-After is reported as RATE_LIMITED regardless of which operation
    produced it, before falling back to the generic transport error.

    Args:
        response: A completed response.

    Returns:
        The same response when its status is 2xx.

    Raises:
        CacheError: RATE_LIMITED or TRANSPORT
    """
    if response.is_success:
        return response

    status_error: httpx.HTTPStatusError | None = None
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        status_error = e

    url = str(response.request.url)

    if response.is_client_error or response.is_server_error:
        retry_after = parse_retry_after(response.headers.get("Retry-After"))
        if retry_after is not None:
            logger.warning(
                "Cache service rate limited request",
                status=response.status_code,
                path=response.request.url.path,
                retry_after=retry_after,
            )
            raise CacheError.rate_limited(
                retry_after,
                status_code=response.status_code,
                url=url,
                cause=status_error,
            )

    raise CacheError.transport(
        f"HTTP {response.status_code} from {response.request.method} "
        f"{response.request.url.path}",
        status_code=response.status_code,
        url=url,
        cause=status_error,
    )


def decode_body(response: httpx.Response, model: type[ModelT]) -> ModelT:
    """Classify a response and decode its JSON body into ``model``.

    Raises:
        CacheError: as ``classify_response``, or TRANSPORT if the body is not
            valid JSON or does not match the schema
    """
    classify_response(response)
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        raise CacheError.transport(
            f"malformed {model.__name__} from {response.request.method} "
            f"{response.request.url.path}",
            status_code=response.status_code,
            url=str(response.request.url),
            cause=e,
        ) from e
