"""
Database Configuration.

The note store: one long-lived handle over an embedded SQLite database,
accessed through SQLAlchemy's async engine with the aiosqlite driver.

The handle is constructed explicitly and passed to whoever needs it. The
engine is created lazily on first use, the schema is created on that same
first use, and the owner closes the handle when done. Once closed, every
operation raises StorageUnavailableError.

Usage:
    from noteprompt.core.database import NoteStore

    store = NoteStore.from_config()
    rows = await store.query(notes_table, order_by=[notes_table.c.updated_at.desc()])
    await store.close()
"""

import asyncio
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import ColumnElement, Table, delete, func, insert, select, update
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from noteprompt.core.exceptions import StorageUnavailableError
from noteprompt.core.logging import get_logger, log_with_source
from noteprompt.models.base import Base

logger = get_logger(__name__)

_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError)


class NoteStore:
    """
    Tabular store over a single SQLite database.

    Offers query/insert/update/delete/count against SQLAlchemy tables.
    Statements run one per transaction; SQLite serializes concurrent
    writers itself, so no locking happens here beyond first-use setup.
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any) -> None:
        """
        Args:
            url: Async SQLAlchemy URL, e.g. sqlite+aiosqlite:///notes.db
            echo: Log emitted SQL
            **engine_kwargs: Passed through to create_async_engine
        """
        self.url = url
        self._echo = echo
        self._engine_kwargs = engine_kwargs
        self._engine: AsyncEngine | None = None
        self._init_lock = asyncio.Lock()
        self._closed = False

    @classmethod
    def from_config(cls) -> "NoteStore":
        """Build a store from config/settings/database.yaml."""
        from noteprompt.core.config import get_app_config, get_database_url

        url = get_database_url()
        Path(url.removeprefix("sqlite+aiosqlite:///")).parent.mkdir(parents=True, exist_ok=True)
        return cls(url, echo=get_app_config().database.echo)

    @property
    def is_open(self) -> bool:
        """Whether the engine has been created and not yet closed."""
        return self._engine is not None and not self._closed

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _create_engine(self) -> AsyncEngine:
        kwargs = dict(self._engine_kwargs)
        if self.url.endswith(":memory:"):
            # Every pooled connection would otherwise get its own empty database.
            kwargs.setdefault("poolclass", StaticPool)
            kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_async_engine(self.url, echo=self._echo, **kwargs)
        logger.debug("Database engine created", extra={"url": self.url})
        return engine

    async def _get_engine(self) -> AsyncEngine:
        """Return the engine, creating it and the schema on first use."""
        if self._closed:
            raise StorageUnavailableError("Note store is closed")
        if self._engine is not None:
            return self._engine

        async with self._init_lock:
            if self._closed:
                raise StorageUnavailableError("Note store is closed")
            if self._engine is None:
                engine = self._create_engine()
                try:
                    async with engine.begin() as conn:
                        await conn.run_sync(Base.metadata.create_all)
                except _UNAVAILABLE_ERRORS as e:
                    await engine.dispose()
                    raise StorageUnavailableError(f"Cannot open note store: {e}") from e
                self._engine = engine
                log_with_source(logger, "storage", "info", "Note store opened", url=self.url)
        return self._engine

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncConnection]:
        """
        Provide a connection inside a transaction.

        Commits on normal exit and rolls back on error.

        Raises:
            StorageUnavailableError: If the store is closed or the database
                cannot be reached
        """
        engine = await self._get_engine()
        try:
            connection = await engine.connect()
        except _UNAVAILABLE_ERRORS as e:
            raise StorageUnavailableError(f"Cannot reach note store: {e}") from e

        try:
            async with connection.begin():
                yield connection
        finally:
            await connection.close()

    async def create_schema(self) -> None:
        """Create missing tables and indexes. Safe to call repeatedly."""
        async with self.transaction() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def query(
        self,
        table: Table,
        where: ColumnElement[bool] | None = None,
        order_by: Sequence[ColumnElement[Any]] = (),
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Select rows as plain dictionaries."""
        statement = select(table)
        if where is not None:
            statement = statement.where(where)
        if order_by:
            statement = statement.order_by(*order_by)
        if limit is not None:
            statement = statement.limit(limit)

        async with self.transaction() as conn:
            result = await conn.execute(statement)
            return [dict(row) for row in result.mappings().all()]

    async def insert(self, table: Table, row: dict[str, Any], replace: bool = True) -> None:
        """
        Insert one row.

        With replace=True an existing row with the same primary key is
        overwritten (INSERT OR REPLACE).
        """
        statement = insert(table).values(**row)
        if replace:
            statement = statement.prefix_with("OR REPLACE")

        async with self.transaction() as conn:
            await conn.execute(statement)

    async def update(
        self,
        table: Table,
        values: dict[str, Any],
        where: ColumnElement[bool],
    ) -> int:
        """Update matching rows. Returns the affected row count."""
        async with self.transaction() as conn:
            result = await conn.execute(update(table).where(where).values(**values))
            return result.rowcount

    async def delete(self, table: Table, where: ColumnElement[bool] | None = None) -> int:
        """Delete matching rows, or every row when where is None. Returns the count."""
        statement = delete(table)
        if where is not None:
            statement = statement.where(where)

        async with self.transaction() as conn:
            result = await conn.execute(statement)
            return result.rowcount

    async def count(self, table: Table) -> int:
        """Total row count of a table."""
        async with self.transaction() as conn:
            result = await conn.execute(select(func.count()).select_from(table))
            return result.scalar_one()

    async def close(self) -> None:
        """Dispose the engine. Further operations raise StorageUnavailableError."""
        self._closed = True
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            log_with_source(logger, "storage", "info", "Note store closed", url=self.url)
