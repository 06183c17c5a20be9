"""Wire schemas for the artifact cache API.

Request and response bodies exchanged with ``/_apis/artifactcache``. The
service speaks camelCase; fields are snake_case here with aliases.

Response models ignore unknown fields so that additions on the server side do
not break older clients.
"""

from pydantic import BaseModel, ConfigDict, Field


class GetCacheResponse(BaseModel):
    """Body of a 200 from ``GET /cache``."""

    cache_key: str = Field(..., alias="cacheKey", description="Exact stored key that matched")
    scope: str = Field(..., description="Branch or scope that stored the entry")
    archive_location: str = Field(
        ..., alias="archiveLocation", description="Pre-signed download URL"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class ReserveCacheRequest(BaseModel):
    """Body of ``POST /caches``."""

    key: str = Field(..., description="Full key the entry will be stored under")
    version: str = Field(..., description="Key space the entry belongs to")

    model_config = ConfigDict(frozen=True)


class ReserveCacheResponse(BaseModel):
    """Body of a 2xx from ``POST /caches``."""

    cache_id: int = Field(..., alias="cacheId", description="Reservation identifier")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class CommitCacheRequest(BaseModel):
    """Body of ``POST /caches/<id>``."""

    size: int = Field(..., ge=0, description="Total bytes uploaded for this reservation")

    model_config = ConfigDict(frozen=True)
