"""
Abstract base class for the record store.

This module defines the contract that every store implementation must
follow, the Record data model it marshals, and the error taxonomy raised
by store operations.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class Record:
    """
    The single persisted entity.

    `id` is caller-supplied and acts as the primary key. Only `message`
    may change after creation.
    """
    id: int
    date: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for statement binding and serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Record":
        """Create from a row mapping."""
        return cls(
            id=int(data["id"]),
            date=str(data["date"]),
            message=str(data["message"]),
        )


class RecordStore(ABC):
    """
    Abstract base class for record persistence.

    Every method is a single auto-committed statement against the backing
    store. Failures are raised as RecordStoreError subclasses, never as
    driver exceptions.
    """

    @abstractmethod
    async def setup(self) -> None:
        """
        Initialize the storage (connection pool, table).

        This should be idempotent.
        """
        pass

    @abstractmethod
    async def insert(self, record: Record) -> None:
        """
        Insert a new record.

        Raises:
            DuplicateKeyError: If a record with the same id exists
        """
        pass

    @abstractmethod
    async def select_all(self) -> list[Record]:
        """Return every record, ordered by id ascending."""
        pass

    @abstractmethod
    async def select_by_id(self, record_id: int) -> Record:
        """
        Return the record with the given id.

        Raises:
            RecordNotFoundError: If no row matches
            AmbiguousResultError: If more than one row matches
        """
        pass

    @abstractmethod
    async def update_message(self, record_id: int, message: str) -> int:
        """
        Rewrite the message of a record.

        Returns the number of affected rows.

        Raises:
            RecordNotFoundError: If no row was affected
        """
        pass

    @abstractmethod
    async def delete(self, record_id: int) -> int:
        """
        Remove a record.

        Returns the number of affected rows.

        Raises:
            RecordNotFoundError: If no row was affected
        """
        pass

    @abstractmethod
    async def ping(self) -> None:
        """Round-trip to the backing store; raises StoreUnavailableError."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources (connections, pools)."""
        pass


class RecordStoreError(Exception):
    """Base exception for record store operations."""
    pass


class DuplicateKeyError(RecordStoreError):
    """A record with this id already exists."""

    def __init__(self, record_id: int):
        self.record_id = record_id
        super().__init__(f"Record {record_id} already exists")


class RecordNotFoundError(RecordStoreError):
    """No record with this id exists."""

    def __init__(self, record_id: int):
        self.record_id = record_id
        super().__init__(f"Record {record_id} not found")


class AmbiguousResultError(RecordStoreError):
    """A lookup by id matched more than one row."""

    def __init__(self, record_id: int, count: int):
        self.record_id = record_id
        self.count = count
        super().__init__(f"Record {record_id} matched {count} rows")


class StoreUnavailableError(RecordStoreError):
    """Backing store unreachable or connection pool exhausted."""
    pass
