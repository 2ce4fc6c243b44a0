"""
Tests for SqlRecordStore.

Runs the real SQL statements against a SQLite file database.
"""

import pytest

from core.storage import (
    DuplicateKeyError,
    Record,
    RecordNotFoundError,
    StoreUnavailableError,
)
from core.storage.sql import SqlRecordStore


@pytest.mark.asyncio
async def test_insert_then_select(store):
    """A created record is found by id unchanged."""
    record = Record(id=1, date="2024-01-01", message="hello")
    await store.insert(record)

    assert await store.select_by_id(1) == record


@pytest.mark.asyncio
async def test_duplicate_insert_keeps_original(store):
    await store.insert(Record(id=7, date="2024-01-01", message="first"))

    with pytest.raises(DuplicateKeyError) as exc_info:
        await store.insert(Record(id=7, date="1999-12-31", message="second"))

    assert exc_info.value.record_id == 7
    assert await store.select_by_id(7) == Record(id=7, date="2024-01-01", message="first")


@pytest.mark.asyncio
async def test_select_all_is_ordered_by_id(store):
    for record_id in (3, 1, 2):
        await store.insert(Record(id=record_id, date="d", message=f"m{record_id}"))

    records = await store.select_all()

    assert [r.id for r in records] == [1, 2, 3]


@pytest.mark.asyncio
async def test_select_all_empty(store):
    assert await store.select_all() == []


@pytest.mark.asyncio
async def test_update_changes_only_message(store):
    await store.insert(Record(id=1, date="2024-01-01", message="hello"))

    affected = await store.update_message(1, "world")

    assert affected == 1
    assert await store.select_by_id(1) == Record(id=1, date="2024-01-01", message="world")


@pytest.mark.asyncio
async def test_delete_removes_record(store):
    await store.insert(Record(id=1, date="2024-01-01", message="hello"))
    await store.insert(Record(id=2, date="2024-01-02", message="keep"))

    assert await store.delete(1) == 1

    with pytest.raises(RecordNotFoundError):
        await store.select_by_id(1)
    assert [r.id for r in await store.select_all()] == [2]


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["select", "update", "delete"])
async def test_missing_id_raises_not_found(store, operation):
    calls = {
        "select": lambda: store.select_by_id(404),
        "update": lambda: store.update_message(404, "nothing"),
        "delete": lambda: store.delete(404),
    }

    with pytest.raises(RecordNotFoundError) as exc_info:
        await calls[operation]()

    assert exc_info.value.record_id == 404


@pytest.mark.asyncio
async def test_large_ids_round_trip(store):
    record = Record(id=2**63 - 1, date="", message="max")
    await store.insert(record)

    assert await store.select_by_id(2**63 - 1) == record


@pytest.mark.asyncio
async def test_setup_is_idempotent(store):
    await store.insert(Record(id=1, date="d", message="m"))

    await store.setup()

    assert len(await store.select_all()) == 1


@pytest.mark.asyncio
async def test_ping(store):
    await store.ping()


@pytest.mark.asyncio
async def test_operations_require_setup(database_url):
    store = SqlRecordStore(database_url)

    with pytest.raises(RuntimeError):
        await store.select_all()


@pytest.mark.asyncio
async def test_unreachable_store_is_unavailable(tmp_path):
    store = SqlRecordStore(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'records.db'}")

    try:
        with pytest.raises(StoreUnavailableError):
            await store.setup()
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_exhausted_pool_times_out(database_url):
    """With every pooled connection checked out, a request gives up after the timeout."""
    store = SqlRecordStore(database_url, pool_size=1, pool_timeout=0.1)
    await store.setup()

    try:
        async with store._engine.connect():
            with pytest.raises(StoreUnavailableError):
                await store.select_all()

        # Connection returned to the pool: requests succeed again
        assert await store.select_all() == []
    finally:
        await store.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
