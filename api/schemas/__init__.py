"""
Pydantic schemas for API request/response validation.
"""

from api.schemas.record import (
    RECORD_ID_MAX,
    RECORD_ID_MIN,
    RecordResponse,
)

__all__ = [
    "RECORD_ID_MAX",
    "RECORD_ID_MIN",
    "RecordResponse",
]
