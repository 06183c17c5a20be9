"""Test configuration and shared fixtures.

Pattern: Pytest fixtures, conftest.py
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator, Iterator
from unittest.mock import patch

import pytest
import pytest_asyncio
import structlog

from actions_cache.cache.client import CacheClient
from actions_cache.core.config import ClientConfig, get_settings
from tests.fakes.fake_cache_service import API_HOST, TOKEN, FakeCacheService


# ============================================================================
# Configuration Fixtures
# ============================================================================

KEY_SPACE = "9796546c64ab15ab7468b479f3b3c20d5840af05ac0f999ad7a089512d01572e"


@pytest.fixture(autouse=True)
def clean_environment() -> Iterator[None]:
    """Isolate every test from runner variables, cached settings and logging setup."""
    scrubbed = {
        name: value
        for name, value in os.environ.items()
        if not name.startswith("ACTIONS_")
    }
    with patch.dict(os.environ, scrubbed, clear=True):
        get_settings.cache_clear()
        yield
    get_settings.cache_clear()
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


@pytest.fixture
def client_config() -> ClientConfig:
    """Client configuration pointing at the fake service."""
    return ClientConfig(
        token=TOKEN,
        endpoint=f"https://{API_HOST}/",
        client_label="actions-cache-tests",
    )


@pytest.fixture
def key_space() -> str:
    return KEY_SPACE


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def fake_service() -> FakeCacheService:
    """Fresh in-memory cache service."""
    return FakeCacheService()


@pytest_asyncio.fixture
async def cache_client(
    client_config: ClientConfig,
    fake_service: FakeCacheService,
) -> AsyncIterator[CacheClient]:
    """CacheClient wired to the fake service."""
    client = CacheClient(client_config, http_transport=fake_service.transport())
    yield client
    await client.close()
