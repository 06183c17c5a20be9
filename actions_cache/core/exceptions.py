"""Errors raised by the artifact cache client.

All failures surface as a single ``CacheError`` tagged with a
``CacheErrorKind``. Kind-specific data lives on the instance and is only
populated for the matching kind, so callers can dispatch exhaustively:

    try:
        await client.put_bytes(key_space, key, payload)
    except CacheError as error:
        match error.kind:
            case CacheErrorKind.RATE_LIMITED:
                await asyncio.sleep(error.retry_after)
            case CacheErrorKind.TRANSPORT:
                ...
            case CacheErrorKind.CONFIGURATION:
                raise

The client never retries internally; deciding what to do with each kind is
the caller's job.
"""

from __future__ import annotations

from enum import Enum


class CacheErrorKind(str, Enum):
    """Discriminator for ``CacheError``.

    - CONFIGURATION: required token or endpoint missing, raised at construction
    - RATE_LIMITED: error status with a parseable Retry-After, see ``retry_after``
    - TRANSPORT: any other non-success status or network-level failure
    """

    CONFIGURATION = "configuration"
    RATE_LIMITED = "rate_limited"
    TRANSPORT = "transport"


class CacheError(Exception):
    """Tagged failure of a cache operation.

    Prefer the ``configuration``, ``rate_limited`` and ``transport``
    constructors over calling this directly; they keep the kind and its
    payload consistent.

    Attributes:
        kind: Which failure this is
        setting: Name of the missing setting (CONFIGURATION only)
        retry_after: Seconds the server asked us to wait (RATE_LIMITED only)
        status_code: HTTP status if a response was received
        url: URL of the failed request if one was sent
        cause: Underlying exception, also chained as ``__cause__``
    """

    def __init__(
        self,
        message: str,
        kind: CacheErrorKind,
        *,
        setting: str | None = None,
        retry_after: int | None = None,
        status_code: int | None = None,
        url: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.kind = kind
        self.setting = setting
        self.retry_after = retry_after
        self.status_code = status_code
        self.url = url
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause
        super().__init__(message)

    @classmethod
    def configuration(
        cls,
        setting: str,
        message: str | None = None,
        *,
        cause: BaseException | None = None,
    ) -> CacheError:
        """Configuration value is absent or invalid.

        Args:
            setting: Which value is at fault ("token", "endpoint" or a settings field)
            message: Optional override for the default message
            cause: Underlying validation error, if any
        """
        return cls(
            message or f"missing required cache client setting: {setting}",
            CacheErrorKind.CONFIGURATION,
            setting=setting,
            cause=cause,
        )

    @classmethod
    def rate_limited(
        cls,
        retry_after: int,
        *,
        status_code: int | None = None,
        url: str | None = None,
        cause: BaseException | None = None,
    ) -> CacheError:
        """Server rate limited the request and asked us to wait."""
        return cls(
            f"server rate limited the request, asking to wait {retry_after} seconds",
            CacheErrorKind.RATE_LIMITED,
            retry_after=retry_after,
            status_code=status_code,
            url=url,
            cause=cause,
        )

    @classmethod
    def transport(
        cls,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
        cause: BaseException | None = None,
    ) -> CacheError:
        """Non-success response or network failure."""
        return cls(
            message,
            CacheErrorKind.TRANSPORT,
            status_code=status_code,
            url=url,
            cause=cause,
        )

    @property
    def is_rate_limited(self) -> bool:
        return self.kind is CacheErrorKind.RATE_LIMITED

    def __repr__(self) -> str:
        return f"CacheError(kind={self.kind.value!r}, message={str(self)!r})"
