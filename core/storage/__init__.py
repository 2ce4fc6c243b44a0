"""
Storage abstraction layer.

Provides the record store gateway: the Record model, the abstract
RecordStore contract, its error taxonomy, and the SQL implementation
built by create_record_store().
"""

from core.storage.base import (
    AmbiguousResultError,
    DuplicateKeyError,
    Record,
    RecordNotFoundError,
    RecordStore,
    RecordStoreError,
    StoreUnavailableError,
)
from core.storage.factory import create_record_store

__all__ = [
    # Data model and abstract interface
    "Record",
    "RecordStore",
    # Errors
    "RecordStoreError",
    "DuplicateKeyError",
    "RecordNotFoundError",
    "AmbiguousResultError",
    "StoreUnavailableError",
    # Factory functions
    "create_record_store",
]
