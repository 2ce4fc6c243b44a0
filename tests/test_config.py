"""
Tests for settings, the storage factory and error mapping.
"""

import pytest
from pydantic import ValidationError

from api.errors import status_for
from core.config import Settings
from core.logging import add_service_context
from core.storage import (
    AmbiguousResultError,
    DuplicateKeyError,
    RecordNotFoundError,
    RecordStoreError,
    StoreUnavailableError,
    create_record_store,
)
from core.storage.sql import SqlRecordStore


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.server_host == "127.0.0.1"
    assert settings.server_port == 3000
    assert settings.pool_size == 5
    assert settings.database_url.startswith("postgresql+asyncpg://")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("POOL_SIZE", "7")
    monkeypatch.setenv("database_url", "sqlite+aiosqlite:///records.db")

    settings = Settings(_env_file=None)

    assert settings.pool_size == 7
    assert settings.database_url == "sqlite+aiosqlite:///records.db"


def test_pool_size_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, pool_size=0)


def test_factory_builds_sql_store(settings):
    store = create_record_store(settings)

    assert isinstance(store, SqlRecordStore)


def test_factory_rejects_invalid_url(settings):
    settings.database_url = "not a database url"

    with pytest.raises(ValueError):
        create_record_store(settings)


@pytest.mark.parametrize(
    "error, expected",
    [
        (DuplicateKeyError(1), 409),
        (RecordNotFoundError(1), 404),
        (AmbiguousResultError(1, 3), 500),
        (StoreUnavailableError("down"), 503),
        (RecordStoreError("other"), 500),
    ],
)
def test_status_mapping(error, expected):
    status_code, _ = status_for(error)

    assert status_code == expected


def test_status_mapping_follows_subclasses():
    class PoolTimeout(StoreUnavailableError):
        pass

    assert status_for(PoolTimeout("slow"))[0] == 503


def test_log_events_carry_service_context():
    processor = add_service_context("production")

    event = processor(None, "info", {"event": "Record created", "record_id": 1})

    assert event["service"] == "records-api"
    assert event["environment"] == "production"
    assert event["record_id"] == 1


def test_service_context_keeps_explicit_values():
    processor = add_service_context("production")

    event = processor(None, "info", {"event": "x", "environment": "staging"})

    assert event["environment"] == "staging"
