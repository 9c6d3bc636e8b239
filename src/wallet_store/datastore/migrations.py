"""Schema migration policy applied every time a store is opened.

There are no incremental migrations. Each store records a fingerprint of the
schema it was created with in its ``store_meta`` table. When the declared
schema no longer matches, the store's :class:`MigrationPolicy` decides:
``DESTRUCTIVE`` stores are dropped and recreated empty, ``FAIL`` stores
refuse to open. Encrypted stores additionally keep a sealed key-check value
that is verified before anything else is read.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from sqlalchemy import Column, LargeBinary, MetaData, String, Table, inspect, select
from sqlalchemy.dialects.sqlite import insert

from wallet_store.engine.registry import MigrationPolicy
from wallet_store.errors.definitions import ErrKeyRequired
from wallet_store.errors.store_errors import SchemaMismatchError, StoreOpenError
from wallet_store.utils.crypto import sha256

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

    from wallet_store.engine.registry import StoreSchema
    from wallet_store.utils.crypto import StoreCipher

logger = logging.getLogger(__name__)

STORE_META = "store_meta"
FINGERPRINT_KEY = "schema_fingerprint"
KEY_CHECK_KEY = "key_check"
KEY_CHECK_PLAINTEXT = b"wallet-store-key-check"

_meta = MetaData()
store_meta = Table(
    STORE_META,
    _meta,
    Column("key", String(64), primary_key=True),
    Column("value", LargeBinary, nullable=False),
)


class MigrationOutcome(enum.StrEnum):
    """What opening a store did to it."""

    CREATED = "created"
    OPENED = "opened"
    RECREATED = "recreated"


def schema_fingerprint(schema: StoreSchema, metadata: MetaData) -> str:
    """Stable hash of the declared tables, independent of column order."""
    parts = [f"version={schema.version}"]
    for table in sorted(metadata.tables.values(), key=lambda t: t.name):
        columns = sorted(table.columns, key=lambda c: c.name)
        parts.extend(
            f"{table.name}.{column.name}:{type(column.type).__name__}"
            f":nullable={column.nullable}:pk={column.primary_key}"
            for column in columns
        )
    return sha256("\n".join(parts).encode("utf-8")).hex()


def _read_meta(connection: Connection) -> dict[str, bytes]:
    rows = connection.execute(select(store_meta.c.key, store_meta.c.value)).all()
    return {key: value for key, value in rows}


def _write_meta(connection: Connection, key: str, value: bytes) -> None:
    stmt = insert(store_meta).values(key=key, value=value)
    stmt = stmt.on_conflict_do_update(index_elements=[store_meta.c.key], set_={"value": value})
    connection.execute(stmt)


def _create(
    connection: Connection,
    metadata: MetaData,
    fingerprint: str,
    cipher: StoreCipher | None,
) -> None:
    _meta.create_all(connection)
    metadata.create_all(connection)
    _write_meta(connection, FINGERPRINT_KEY, fingerprint.encode("ascii"))
    if cipher is not None:
        _write_meta(connection, KEY_CHECK_KEY, cipher.seal(KEY_CHECK_PLAINTEXT))


def drop_all_tables(connection: Connection) -> None:
    """Drop every table in the store, including ones no longer declared."""
    for name in inspect(connection).get_table_names():
        connection.exec_driver_sql(f'DROP TABLE IF EXISTS "{name}"')


def verify_key(connection: Connection, schema: StoreSchema, cipher: StoreCipher) -> None:
    """Check that *cipher* opens the store's key-check value.

    Raises:
        StoreOpenError: On a wrong key, a missing check or damaged data; the
            cases are not told apart.
    """
    message = f"unable to open {schema.name} store"
    if STORE_META not in inspect(connection).get_table_names():
        raise StoreOpenError(message)
    sealed = _read_meta(connection).get(KEY_CHECK_KEY)
    try:
        if sealed is None or cipher.open(sealed) != KEY_CHECK_PLAINTEXT:
            raise StoreOpenError(message)
    except StoreOpenError:
        raise StoreOpenError(message) from None


def apply_migration_policy(
    connection: Connection,
    schema: StoreSchema,
    metadata: MetaData,
    cipher: StoreCipher | None,
) -> MigrationOutcome:
    """Create, verify or migrate the store behind *connection*.

    Runs inside ``AsyncConnection.run_sync`` at open time.

    Raises:
        StoreOpenError: Encrypted store opened with no key or the wrong key.
        SchemaMismatchError: Schema drifted on a ``FAIL``-policy store.
    """
    if schema.encrypted and cipher is None:
        raise ErrKeyRequired

    fingerprint = schema_fingerprint(schema, metadata)
    tables = set(inspect(connection).get_table_names())
    if not tables:
        _create(connection, metadata, fingerprint, cipher)
        return MigrationOutcome.CREATED

    if cipher is not None:
        verify_key(connection, schema, cipher)

    meta = _read_meta(connection) if STORE_META in tables else {}
    if meta.get(FINGERPRINT_KEY) == fingerprint.encode("ascii"):
        return MigrationOutcome.OPENED

    if schema.migration is MigrationPolicy.FAIL:
        msg = f"{schema.name} store schema does not match the declared schema"
        raise SchemaMismatchError(msg)

    logger.warning("Schema of %s store changed, recreating it empty", schema.name)
    drop_all_tables(connection)
    _create(connection, metadata, fingerprint, cipher)
    return MigrationOutcome.RECREATED
