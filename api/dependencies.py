"""
FastAPI dependencies for dependency injection.

The record store is opened in the application lifespan and kept on
app.state; route handlers receive it through get_record_store.
"""

from fastapi import Request

from core.storage import RecordStore


async def get_record_store(request: Request) -> RecordStore:
    """
    Dependency that provides the record store.

    Usage:
        @router.get("/database_read")
        async def read_records(
            store: RecordStore = Depends(get_record_store)
        ):
            ...
    """
    store = getattr(request.app.state, "record_store", None)
    if store is None:
        raise RuntimeError("Record store not initialized")
    return store
