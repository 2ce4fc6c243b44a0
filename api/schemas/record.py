"""
Record request and response schemas.

These Pydantic models define the JSON contract of the read and search
endpoints and provide automatic documentation.
"""

from pydantic import BaseModel, Field

from core.storage import Record


# Ids are stored as BIGINT
RECORD_ID_MIN = -(2**63)
RECORD_ID_MAX = 2**63 - 1


class RecordResponse(BaseModel):
    """A persisted record as returned by read and search."""

    id: int = Field(
        ...,
        description="Caller-supplied unique identifier",
        examples=[1],
    )
    date: str = Field(
        ...,
        description="Free-form date string, stored as given",
        examples=["2024-01-01"],
    )
    message: str = Field(
        ...,
        description="Free-form message text",
        examples=["hello"],
    )

    @classmethod
    def from_record(cls, record: Record) -> "RecordResponse":
        return cls(**record.to_dict())
