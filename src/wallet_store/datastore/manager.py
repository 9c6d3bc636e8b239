"""Store manager — scoped open / operate / close per logical store.

Every call opens the store fresh, applies its migration policy, hands a
:class:`StoreHandle` to the operation and releases the session and engine
before returning, on every exit path. Failures never propagate: they are
tagged as :class:`StoreError`, reported, and returned in a
:class:`StoreResult` (``run``) or replaced by a default (``with_store``).
A store file created by a call that then fails is removed again.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from wallet_store.datastore.client import Datastore
from wallet_store.datastore.migrations import apply_migration_policy
from wallet_store.engine.registry import SchemaContext
from wallet_store.errors.definitions import ErrKeyRequired, ErrStoreMissing
from wallet_store.errors.reporter import LoggingReporter
from wallet_store.errors.store_errors import (
    CompactionError,
    StoreError,
    StoreOpenError,
    WriteError,
    as_store_error,
)
from wallet_store.utils.crypto import StoreCipher

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable
    from pathlib import Path

    from sqlalchemy import MetaData, Table
    from sqlalchemy.ext.asyncio import AsyncSession

    from wallet_store.config.settings import StorageConfig
    from wallet_store.engine.registry import StoreSchema
    from wallet_store.errors.reporter import ErrorReporter

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Outcome of one store operation: a value or a tagged error."""

    value: T | None = None
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class StoreHandle:
    """Live access to one open store, valid only inside the operation."""

    def __init__(self, schema: StoreSchema, datastore: Datastore, metadata: MetaData) -> None:
        self.schema = schema
        self._datastore = datastore
        self._metadata = metadata
        self._session: AsyncSession | None = None

    @property
    def session(self) -> AsyncSession:
        """Session bound to the store, created on first use."""
        if self._session is None:
            self._session = self._datastore.session()
        return self._session

    def table(self, name: str) -> Table:
        """Declared table *name* of this store."""
        return self._metadata.tables[name]

    @asynccontextmanager
    async def write(self) -> AsyncIterator[AsyncSession]:
        """Atomic write scope: commit on success, roll back on any failure.

        Raises:
            WriteError: If the database rejects the writes or the commit.
        """
        session = self.session
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            msg = f"write to {self.schema.name} store failed"
            raise WriteError(msg) from exc
        except Exception:
            await session.rollback()
            raise

    async def compact(self) -> None:
        """Reclaim unused space without changing the store's contents.

        Raises:
            CompactionError: If ``VACUUM`` fails.
        """
        await self.close()
        try:
            await self._datastore.vacuum()
        except SQLAlchemyError as exc:
            msg = f"compaction of {self.schema.name} store failed"
            raise CompactionError(msg) from exc

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None


class StoreManager:
    """Opens stores on demand and contains every failure at its boundary.

    Usage::

        manager = StoreManager(config, reporter)
        prefs = await manager.with_store(PREFERENCES_STORE, load, default=None)
    """

    def __init__(self, config: StorageConfig, reporter: ErrorReporter | None = None) -> None:
        self._config = config
        self._reporter = reporter or LoggingReporter()

    @property
    def config(self) -> StorageConfig:
        return self._config

    def exists(self, schema: StoreSchema) -> bool:
        """Whether the store's file has been created."""
        return self._config.store_path(schema.filename).exists()

    def report(self, message: str, error: BaseException) -> None:
        """Hand a caught failure to the reporter; never raises."""
        try:
            self._reporter.report(message, error)
        except Exception:
            logger.exception("Error reporter failed while reporting %r", message)

    def report_error(self, schema: StoreSchema, exc: BaseException) -> StoreError:
        """Tag *exc* as a store error and report it against *schema*."""
        error = as_store_error(exc)
        self.report(f"Error interacting with {schema.name} store ({error.code})", exc)
        return error

    async def run(
        self,
        schema: StoreSchema,
        operation: Callable[[StoreHandle], Awaitable[T]],
        *,
        key: bytes | None = None,
        create: bool = True,
    ) -> StoreResult[T]:
        """Open *schema*'s store, run *operation* on it and close it.

        Args:
            schema: The store to open.
            operation: Coroutine function receiving the live handle.
            key: Derived key, required for encrypted stores.
            create: When False a missing store file is an error instead of
                being created.

        Returns:
            ``StoreResult`` with the operation's value, or the tagged error.
        """
        try:
            value = await self._run(schema, operation, key=key, create=create)
        except Exception as exc:
            return StoreResult(error=self.report_error(schema, exc))
        return StoreResult(value=value)

    async def with_store(
        self,
        schema: StoreSchema,
        operation: Callable[[StoreHandle], Awaitable[T]],
        *,
        key: bytes | None = None,
        default: Any = None,
        create: bool = True,
    ) -> Any:
        """Like :meth:`run` but returns *default* instead of an error."""
        result = await self.run(schema, operation, key=key, create=create)
        return result.value if result.ok else default

    async def _run(
        self,
        schema: StoreSchema,
        operation: Callable[[StoreHandle], Awaitable[T]],
        *,
        key: bytes | None,
        create: bool,
    ) -> T:
        path = self._config.store_path(schema.filename)
        existed = path.exists()
        datastore = Datastore(self._config.store_database(schema.filename))
        handle: StoreHandle | None = None
        failed = False
        try:
            metadata = await self._open(schema, datastore, key=key, create=create)
            handle = StoreHandle(schema, datastore, metadata)
            return await operation(handle)
        except Exception:
            failed = True
            raise
        finally:
            if handle is not None:
                await handle.close()
            await datastore.close()
            # A store first created by a failed call is not left behind.
            if failed and not existed:
                self._discard(schema, path)

    def _discard(self, schema: StoreSchema, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.exception("Could not remove unfinished %s store at %s", schema.name, path)
        else:
            logger.debug("Removed unfinished %s store at %s", schema.name, path)

    async def _open(
        self,
        schema: StoreSchema,
        datastore: Datastore,
        *,
        key: bytes | None,
        create: bool,
    ) -> MetaData:
        path = self._config.store_path(schema.filename)
        if not create and not path.exists():
            raise ErrStoreMissing
        if schema.encrypted and key is None:
            raise ErrKeyRequired

        try:
            cipher = StoreCipher(key) if schema.encrypted and key is not None else None
            context = SchemaContext(cipher=cipher, currencies=tuple(self._config.currencies))
            metadata = schema.build_metadata(context)
            path.parent.mkdir(parents=True, exist_ok=True)
            await datastore.open()
            async with datastore.engine.begin() as conn:
                outcome = await conn.run_sync(
                    apply_migration_policy, schema, metadata, cipher
                )
        except StoreError:
            raise
        except Exception as exc:
            msg = f"unable to open {schema.name} store"
            raise StoreOpenError(msg) from exc

        logger.debug("Opened %s store (%s)", schema.name, outcome)
        return metadata
