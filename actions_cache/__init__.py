"""Client for the build-pipeline artifact cache service.

Example:
    ```python
    from actions_cache import CacheClient, ClientConfig

    async with CacheClient(ClientConfig(token=token, endpoint=url)) as cache:
        found = await cache.get_bytes("v1-deps", ["deps-linux-abc", "deps-linux-"])
    ```
"""

from actions_cache.cache import (
    CacheClient,
    CacheClientProtocol,
    CacheEntry,
    CacheHit,
    CacheReservation,
)
from actions_cache.core import (
    CacheError,
    CacheErrorKind,
    ClientConfig,
    Settings,
)


__version__ = "0.1.0"

__all__ = [
    "CacheClient",
    "CacheClientProtocol",
    "CacheEntry",
    "CacheError",
    "CacheErrorKind",
    "CacheHit",
    "CacheReservation",
    "ClientConfig",
    "Settings",
    "__version__",
]
