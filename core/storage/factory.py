"""
Storage factory for creating record store instances.

This module provides the factory function that builds the store
implementation from configuration.
"""

from typing import TYPE_CHECKING

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from core.logging import get_logger
from core.storage.base import RecordStore


if TYPE_CHECKING:
    from core.config import Settings


logger = get_logger(__name__)


def create_record_store(settings: "Settings") -> RecordStore:
    """
    Create a record store instance based on settings.

    Args:
        settings: Application settings

    Returns:
        Configured record store (not yet initialized)
    """
    try:
        url = make_url(settings.database_url)
    except ArgumentError:
        raise ValueError(f"Invalid database URL: {settings.database_url!r}")

    from core.storage.sql import SqlRecordStore

    logger.info(
        "Creating SQL record store",
        backend=url.get_backend_name(),
        driver=url.get_driver_name(),
        database=url.database,
        pool_size=settings.pool_size,
    )
    return SqlRecordStore(
        connection_string=settings.database_url,
        pool_size=settings.pool_size,
        pool_timeout=settings.pool_timeout_seconds,
        echo=settings.debug,
    )
