"""Datastore client — one SQLite store file behind an async engine.

A ``Datastore`` lives only for the duration of a single store operation:
the manager opens it, migrates the schema, hands out one session and then
disposes the engine so no file handle outlives the call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from wallet_store.datastore.engines import create_engine

if TYPE_CHECKING:
    from wallet_store.config.settings import DatabaseConfig

_ERR_NOT_OPEN = "Datastore is not open. Call open() first."


class Datastore:
    """Engine and session factory for one store file.

    Usage::

        ds = Datastore(config.store_database("payees.db"))
        await ds.open()
        async with ds.session() as session:
            ...
        await ds.vacuum()
        await ds.close()
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self._config = config
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """The live engine.

        Raises:
            RuntimeError: If the datastore is not open.
        """
        if self._engine is None:
            raise RuntimeError(_ERR_NOT_OPEN)
        return self._engine

    @property
    def dsn(self) -> str:
        return self._config.dsn

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    async def open(self) -> None:  # noqa: ASYNC910
        """Create the engine. Connections are made lazily on first use."""
        if self._engine is not None:
            return
        self._engine = create_engine(self._config)
        # Rows are read back after commit, so keep them loaded.
        self._sessions = async_sessionmaker(self._engine, expire_on_commit=False)

    async def close(self) -> None:
        """Dispose the engine. Safe to call more than once."""
        engine, self._engine, self._sessions = self._engine, None, None
        if engine is not None:
            await engine.dispose()

    def session(self) -> AsyncSession:
        """New session on this store; the caller closes it.

        Raises:
            RuntimeError: If the datastore is not open.
        """
        if self._sessions is None:
            raise RuntimeError(_ERR_NOT_OPEN)
        return self._sessions()

    async def vacuum(self) -> None:
        """Rebuild the store file, reclaiming free pages.

        ``VACUUM`` cannot run inside a transaction, so it is issued on an
        autocommit connection.
        """
        async with self.engine.connect() as conn:
            autocommit = await conn.execution_options(isolation_level="AUTOCOMMIT")
            await autocommit.exec_driver_sql("VACUUM")
