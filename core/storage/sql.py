"""
SQL storage backend implementation.

Provides the relational RecordStore on top of a SQLAlchemy async engine.
The engine owns a bounded connection pool shared by all requests; a
request that cannot get a connection within the pool timeout fails with
StoreUnavailableError instead of waiting forever.

Works with any async SQLAlchemy dialect; production uses PostgreSQL via
asyncpg.
"""

from typing import Any, Optional

from sqlalchemy import exc, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.logging import get_logger
from core.storage.base import (
    AmbiguousResultError,
    DuplicateKeyError,
    Record,
    RecordNotFoundError,
    RecordStore,
    StoreUnavailableError,
)


logger = get_logger(__name__)

# Errors meaning "the store could not be reached", as opposed to a
# statement the store rejected.
_UNAVAILABLE_ERRORS = (
    exc.OperationalError,
    exc.InterfaceError,
    exc.TimeoutError,
    OSError,
)


class SqlRecordStore(RecordStore):
    """
    SQL-based record store.

    Uses SQLAlchemy async sessions with textual, parameterized statements.
    """

    TABLE_NAME = "records"

    def __init__(
        self,
        connection_string: str,
        pool_size: int = 5,
        pool_timeout: float = 30.0,
        echo: bool = False,
    ):
        """
        Initialize the SQL record store.

        Args:
            connection_string: SQLAlchemy async connection URI
            pool_size: Maximum simultaneous connections (no overflow)
            pool_timeout: Seconds to wait for a free connection
            echo: Whether to echo SQL statements
        """
        self._connection_string = connection_string
        self._pool_size = pool_size
        self._pool_timeout = pool_timeout
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def setup(self) -> None:
        """Initialize connection pool and create table if not exists."""
        if self._engine is None:
            self._engine = create_async_engine(
                self._connection_string,
                echo=self._echo,
                pool_pre_ping=True,
                pool_size=self._pool_size,
                max_overflow=0,
                pool_timeout=self._pool_timeout,
            )
            self._session_factory = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

        try:
            async with self._engine.begin() as conn:
                await conn.execute(text(f"""
                    CREATE TABLE IF NOT EXISTS {self.TABLE_NAME} (
                        id BIGINT PRIMARY KEY,
                        date TEXT NOT NULL,
                        message TEXT NOT NULL
                    )
                """))
        except _UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError(f"Cannot initialize record store: {e}") from e

        logger.info(
            "SQL record store initialized",
            table=self.TABLE_NAME,
            pool_size=self._pool_size,
        )

    def _get_session(self) -> AsyncSession:
        """Get a new session."""
        if self._session_factory is None:
            raise RuntimeError(
                "Record store not initialized. Call setup() first."
            )
        return self._session_factory()

    async def _execute(
        self,
        statement: str,
        params: dict[str, Any],
    ) -> tuple[int, list[dict[str, Any]]]:
        """
        Run one statement in its own transaction.

        Returns (affected row count, fetched rows). Driver connectivity
        errors are translated to StoreUnavailableError; everything else
        propagates for the caller to classify.
        """
        try:
            async with self._get_session() as session:
                result = await session.execute(text(statement), params)
                if result.returns_rows:
                    rows = [dict(row) for row in result.mappings().all()]
                    rowcount = len(rows)
                else:
                    rows = []
                    rowcount = result.rowcount
                await session.commit()
                return rowcount, rows
        except _UNAVAILABLE_ERRORS as e:
            logger.error("Record store unavailable", error=str(e))
            raise StoreUnavailableError(f"Record store unavailable: {e}") from e

    async def insert(self, record: Record) -> None:
        """Insert a new record; the primary key rejects duplicates."""
        try:
            await self._execute(
                f"""
                    INSERT INTO {self.TABLE_NAME} (id, date, message)
                    VALUES (:id, :date, :message)
                """,
                record.to_dict(),
            )
        except exc.IntegrityError as e:
            raise DuplicateKeyError(record.id) from e

        logger.debug("Record inserted", record_id=record.id)

    async def select_all(self) -> list[Record]:
        """Return every record, ordered by id."""
        _, rows = await self._execute(
            f"SELECT id, date, message FROM {self.TABLE_NAME} ORDER BY id ASC",
            {},
        )
        return [Record.from_dict(row) for row in rows]

    async def select_by_id(self, record_id: int) -> Record:
        """Return the single record with this id."""
        _, rows = await self._execute(
            f"SELECT id, date, message FROM {self.TABLE_NAME} WHERE id = :id",
            {"id": record_id},
        )

        if not rows:
            raise RecordNotFoundError(record_id)
        if len(rows) > 1:
            raise AmbiguousResultError(record_id, len(rows))

        return Record.from_dict(rows[0])

    async def update_message(self, record_id: int, message: str) -> int:
        """Rewrite message; id and date are left untouched."""
        rowcount, _ = await self._execute(
            f"UPDATE {self.TABLE_NAME} SET message = :message WHERE id = :id",
            {"id": record_id, "message": message},
        )

        if rowcount == 0:
            raise RecordNotFoundError(record_id)

        logger.debug("Record updated", record_id=record_id)
        return rowcount

    async def delete(self, record_id: int) -> int:
        """Remove the record with this id."""
        rowcount, _ = await self._execute(
            f"DELETE FROM {self.TABLE_NAME} WHERE id = :id",
            {"id": record_id},
        )

        if rowcount == 0:
            raise RecordNotFoundError(record_id)

        logger.debug("Record deleted", record_id=record_id)
        return rowcount

    async def ping(self) -> None:
        """Check that a pooled connection can reach the store."""
        await self._execute("SELECT 1", {})

    async def close(self) -> None:
        """Close database engine."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
        logger.info("SQL record store closed")
