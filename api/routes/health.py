"""
Informational and health check endpoints.

Provides the root page, the liveness page and a readiness probe for
load balancers.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from api.dependencies import get_record_store
from core.logging import get_logger
from core.storage import RecordStore


logger = get_logger(__name__)
router = APIRouter(tags=["Health"])


ROOT_PAGE = (
    "<h1>Welcome to the Records API</h1>"
    "<h2>Available routes:</h2>"
    "<p>GET / - this route, the root</p>"
    "<p>GET /health_check - current API status</p>"
    "<p>GET /database_read - list all records</p>"
    "<p>POST /database_create?id=&amp;date=&amp;message= - create a record</p>"
    "<p>PUT /database_update?id=&amp;message= - update a record's message</p>"
    "<p>POST /database_delete?id= - delete a record</p>"
    "<p>GET /database_search?id= - find a record by id</p>"
)

HEALTH_PAGE = (
    "<h1>Welcome to the Records API</h1>"
    "<h2>Status:</h2>"
    "<p>Alive, 200 OK</p>"
)


@router.get("/", response_class=HTMLResponse)
async def root() -> str:
    return ROOT_PAGE


@router.get("/health_check", response_class=HTMLResponse)
async def health_check() -> str:
    """
    Basic health check.

    Returns 200 if the service is running. Does not touch the store.
    """
    return HEALTH_PAGE


@router.get("/ready")
async def readiness_check(
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    Readiness check.

    Returns 200 once a pooled connection reaches the store; a
    StoreUnavailableError turns into 503 through the error handlers.
    """
    await store.ping()
    return {"status": "ready"}
