"""
Pytest configuration and fixtures.
"""

import os

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Set test environment
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from api.server import create_app
from core.config import Settings
from core.storage.sql import SqlRecordStore


@pytest.fixture
def database_url(tmp_path) -> str:
    """SQLite file database, one per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'records.db'}"


@pytest.fixture
def settings(database_url) -> Settings:
    return Settings(
        database_url=database_url,
        pool_size=2,
        pool_timeout_seconds=1.0,
        environment="development",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def store(database_url):
    """An initialized SQL record store."""
    store = SqlRecordStore(database_url, pool_size=2, pool_timeout=1.0)
    await store.setup()
    yield store
    await store.close()


@pytest.fixture
def client(settings):
    """HTTP client running the full application lifespan."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
