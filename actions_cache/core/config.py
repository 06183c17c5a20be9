"""Client configuration.

``ClientConfig`` is the only thing the cache core needs: a bearer token, a
base endpoint and a label identifying the calling program. It is built
explicitly and never reads process state on its own.

``Settings`` is the environment-facing loader used by the CLI and by
``ClientConfig.from_env()``. It follows the Pydantic Settings pattern and reads
the variables the build runner exports (ACTIONS_RUNTIME_TOKEN,
ACTIONS_CACHE_URL) plus ACTIONS_CACHE_-prefixed tuning knobs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from actions_cache.core.constants import (
    API_PATH,
    DEFAULT_CLIENT_LABEL,
    ENV_CACHE_URL,
    ENV_PREFIX,
    ENV_RUNTIME_TOKEN,
)
from actions_cache.core.exceptions import CacheError


@dataclass(frozen=True)
class ClientConfig:
    """Immutable connection settings for a ``CacheClient``.

    Attributes:
        token: Bearer token sent on every API request (hidden from repr)
        endpoint: Base service URL, e.g. ``https://cache.example.com/abc/``
        client_label: Identifies the calling program, sent as User-Agent
        timeout: Optional per-request timeout in seconds; None means the
            client imposes no deadline of its own

    Raises:
        CacheError: kind CONFIGURATION if token or endpoint is empty
    """

    token: str = field(repr=False)
    endpoint: str
    client_label: str = DEFAULT_CLIENT_LABEL
    timeout: float | None = None

    def __post_init__(self) -> None:
        if not self.token:
            raise CacheError.configuration(
                "token",
                f"did not find a runtime token (set {ENV_RUNTIME_TOKEN})",
            )
        if not self.endpoint:
            raise CacheError.configuration(
                "endpoint",
                f"did not find the cache endpoint URL (set {ENV_CACHE_URL})",
            )

    @property
    def api_base_url(self) -> str:
        """Root of the cache API, e.g. ``<endpoint>/_apis/artifactcache``."""
        return self.endpoint.rstrip("/") + API_PATH

    @classmethod
    def from_env(cls, settings: Settings | None = None) -> ClientConfig:
        """Build a config from runner environment variables.

        Args:
            settings: Preloaded settings. Uses get_settings() if not provided.
        """
        return (settings or get_settings()).to_client_config()


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    The token and endpoint use the runner's own variable names; everything
    else is read with the ACTIONS_CACHE_ prefix.
    """

    runtime_token: SecretStr | None = Field(
        default=None,
        validation_alias=ENV_RUNTIME_TOKEN,
        description="Bearer token for the cache service",
    )
    cache_url: str | None = Field(
        default=None,
        validation_alias=ENV_CACHE_URL,
        description="Base endpoint of the cache service",
    )

    client_label: str = Field(
        default=DEFAULT_CLIENT_LABEL,
        description="User-Agent identifying the calling program",
    )
    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-request timeout; unset means no client-side deadline",
    )

    environment: str = Field(default="development", description="Runtime environment")
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    def to_client_config(self) -> ClientConfig:
        """Validate and freeze into a ``ClientConfig``.

        Raises:
            CacheError: kind CONFIGURATION naming the first missing value
        """
        token = self.runtime_token.get_secret_value() if self.runtime_token else ""
        return ClientConfig(
            token=token,
            endpoint=self.cache_url or "",
            client_label=self.client_label,
            timeout=self.http_timeout_seconds,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Process-wide settings singleton

    Raises:
        CacheError: kind CONFIGURATION naming the first invalid setting
    """
    try:
        return Settings()
    except ValidationError as e:
        error = e.errors()[0]
        setting = str(error["loc"][0]) if error["loc"] else "settings"
        raise CacheError.configuration(
            setting,
            f"invalid cache client setting {setting}: {error['msg']}",
            cause=e,
        ) from e
