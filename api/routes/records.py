"""
Record endpoints.

Provides CRUD and lookup over the records table. All per-request data
arrives in the query string:
- GET  /database_read                          - List all records
- POST /database_create?id=&date=&message=     - Create a record
- PUT  /database_update?id=&message=           - Rewrite a record's message
- POST /database_delete?id=                    - Delete a record
- GET  /database_search?id=                    - Get a record by id

Store failures propagate as RecordStoreError and are mapped to status
codes in api.errors.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from api.dependencies import get_record_store
from api.schemas import RECORD_ID_MAX, RECORD_ID_MIN, RecordResponse
from core.logging import get_logger
from core.storage import Record, RecordStore


logger = get_logger(__name__)
router = APIRouter(tags=["Records"])


def _record_id(
    record_id: int = Query(
        ...,
        alias="id",
        ge=RECORD_ID_MIN,
        le=RECORD_ID_MAX,
        description="Record identifier",
    ),
) -> int:
    return record_id


@router.get("/database_read", response_model=list[RecordResponse])
async def read_records(
    store: RecordStore = Depends(get_record_store),
) -> list[RecordResponse]:
    """Return every stored record, ordered by id."""
    records = await store.select_all()
    logger.debug("Records read", count=len(records))
    return [RecordResponse.from_record(record) for record in records]


@router.post("/database_create", response_class=HTMLResponse)
async def create_record(
    record_id: int = Depends(_record_id),
    date: str = Query(..., description="Free-form date string"),
    message: str = Query(..., description="Message text"),
    store: RecordStore = Depends(get_record_store),
) -> str:
    """
    Create a new record with a caller-supplied id.

    A second create with the same id is rejected with 409 and leaves the
    existing record unchanged.
    """
    logger.info("Creating record", record_id=record_id)

    await store.insert(Record(id=record_id, date=date, message=message))

    return f"<h1>Record created</h1><p>Record {record_id} was added to the database.</p>"


@router.put("/database_update", response_class=HTMLResponse)
async def update_record(
    record_id: int = Depends(_record_id),
    message: str = Query(..., description="New message text"),
    store: RecordStore = Depends(get_record_store),
) -> str:
    """Rewrite the message of an existing record. The date is immutable."""
    logger.info("Updating record", record_id=record_id)

    await store.update_message(record_id, message)

    return f"<h1>Record updated</h1><p>Record {record_id} has a new message.</p>"


@router.post("/database_delete", response_class=HTMLResponse)
async def delete_record(
    record_id: int = Depends(_record_id),
    store: RecordStore = Depends(get_record_store),
) -> str:
    logger.info("Deleting record", record_id=record_id)

    await store.delete(record_id)

    return f"<h1>Record deleted</h1><p>Record {record_id} was removed from the database.</p>"


@router.get("/database_search", response_model=RecordResponse)
async def search_record(
    record_id: int = Depends(_record_id),
    store: RecordStore = Depends(get_record_store),
) -> RecordResponse:
    """
    Look up exactly one record by id.

    Returns 404 when no record matches.
    """
    logger.debug("Searching record", record_id=record_id)

    record = await store.select_by_id(record_id)
    return RecordResponse.from_record(record)
