"""
Error-to-response mapping.

Record store failures and request decoding failures are turned into HTML
responses with a status code per error type. None of them reaches the
server as an unhandled exception.
"""

import html

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger
from core.storage import (
    AmbiguousResultError,
    DuplicateKeyError,
    RecordNotFoundError,
    RecordStoreError,
    StoreUnavailableError,
)


logger = get_logger(__name__)

NOT_FOUND_PAGE = "<h1>Nothing here by that name...yet.</h1>"

# status code, page title
ERROR_RESPONSES: dict[type[RecordStoreError], tuple[int, str]] = {
    DuplicateKeyError: (409, "Duplicate key"),
    RecordNotFoundError: (404, "Record not found"),
    AmbiguousResultError: (500, "Ambiguous result"),
    StoreUnavailableError: (503, "Store unavailable"),
}


def error_page(title: str, detail: str) -> str:
    return f"<h1>{html.escape(title)}</h1><p>{html.escape(detail)}</p>"


def status_for(error: RecordStoreError) -> tuple[int, str]:
    """Resolve the status and title for an error, honoring subclasses."""
    for cls in type(error).__mro__:
        if cls in ERROR_RESPONSES:
            return ERROR_RESPONSES[cls]
    return 500, "Record store error"


async def record_store_error_handler(request: Request, exc: RecordStoreError) -> HTMLResponse:
    status_code, title = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Record store error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        error=str(exc),
        status_code=status_code,
    )
    return HTMLResponse(error_page(title, str(exc)), status_code=status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> HTMLResponse:
    """Missing or unparseable query parameters are a client error (400)."""
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())[1:]) or "request"
        problems.append(f"{field}: {error.get('msg', 'invalid value')}")
    detail = "; ".join(problems) or "Malformed request"

    logger.warning(
        "Malformed input",
        path=request.url.path,
        method=request.method,
        error=detail,
    )
    return HTMLResponse(error_page("Malformed input", detail), status_code=400)


async def route_not_found_handler(request: Request, exc: StarletteHTTPException) -> HTMLResponse:
    """
    Unmatched paths (404) and unmatched methods on known paths (405) both
    answer with the fixed not-found page.
    """
    if exc.status_code in (404, 405):
        return HTMLResponse(NOT_FOUND_PAGE, status_code=404)
    return HTMLResponse(
        error_page(f"Error {exc.status_code}", str(exc.detail)),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> HTMLResponse:
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True,
    )
    return HTMLResponse(
        error_page("Internal server error", "An error occurred"),
        status_code=500,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecordStoreError, record_store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, route_not_found_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
