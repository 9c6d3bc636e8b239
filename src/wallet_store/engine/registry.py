"""Store schema registry — one declaration per persisted store.

Every store is an independent SQLite file with its own schema, migration
policy and (for the wallet) encryption. The migration policy is declared
here explicitly for each store and audited when the registry is built:
an encrypted store can never be declared for destructive migration.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from wallet_store.engine.models import (
    AppStateBase,
    CompactionInfoBase,
    PayeeBase,
    PreferencesBase,
    TransactionDetailsBase,
    build_price_metadata,
    build_wallet_metadata,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sqlalchemy import MetaData

    from wallet_store.utils.crypto import StoreCipher


class MigrationPolicy(enum.StrEnum):
    """What to do when the persisted schema differs from the declared one."""

    DESTRUCTIVE = "destructive"  # drop the store and recreate it empty
    FAIL = "fail"  # refuse to open


@dataclass(frozen=True)
class SchemaContext:
    """Runtime inputs some schemas are built from."""

    cipher: StoreCipher | None = None
    currencies: Sequence[str] = ()


@dataclass(frozen=True)
class StoreSchema:
    """Declaration of one persisted store."""

    name: str
    filename: str
    build_metadata: Callable[[SchemaContext], MetaData] = field(repr=False)
    migration: MigrationPolicy = MigrationPolicy.DESTRUCTIVE
    encrypted: bool = False
    version: int = 1


def _static(metadata: MetaData) -> Callable[[SchemaContext], MetaData]:
    return lambda _context: metadata


def _wallet_metadata(context: SchemaContext) -> MetaData:
    if context.cipher is None:
        msg = "wallet schema requires a cipher"
        raise ValueError(msg)
    return build_wallet_metadata(context.cipher)


WALLET_STORE = StoreSchema(
    name="wallet",
    filename="wallet.db",
    build_metadata=_wallet_metadata,
    # Wallet state is irreplaceable: a schema change must fail the open.
    migration=MigrationPolicy.FAIL,
    encrypted=True,
)
PREFERENCES_STORE = StoreSchema(
    name="preferences",
    filename="preferences.db",
    build_metadata=_static(PreferencesBase.metadata),
)
PAYEES_STORE = StoreSchema(
    name="payees",
    filename="payees.db",
    build_metadata=_static(PayeeBase.metadata),
)
PRICE_DATA_STORE = StoreSchema(
    name="price-data",
    filename="price_data.db",
    build_metadata=lambda context: build_price_metadata(context.currencies),
)
TRANSACTION_DETAILS_STORE = StoreSchema(
    name="transaction-details",
    filename="transaction_details.db",
    build_metadata=_static(TransactionDetailsBase.metadata),
)
COMPACTION_INFO_STORE = StoreSchema(
    name="compaction-info",
    filename="compaction_info.db",
    build_metadata=_static(CompactionInfoBase.metadata),
)
APP_STATE_STORE = StoreSchema(
    name="app-state",
    filename="app_state.db",
    build_metadata=_static(AppStateBase.metadata),
)


def _audit(schemas: Sequence[StoreSchema]) -> dict[str, StoreSchema]:
    """Index *schemas* by name, rejecting unsafe or ambiguous declarations."""
    registry: dict[str, StoreSchema] = {}
    filenames: set[str] = set()
    for schema in schemas:
        if schema.encrypted and schema.migration is MigrationPolicy.DESTRUCTIVE:
            msg = f"encrypted store {schema.name!r} must not use destructive migration"
            raise ValueError(msg)
        if schema.name in registry or schema.filename in filenames:
            msg = f"store {schema.name!r} is declared twice"
            raise ValueError(msg)
        registry[schema.name] = schema
        filenames.add(schema.filename)
    return registry


STORE_SCHEMAS: dict[str, StoreSchema] = _audit(
    [
        WALLET_STORE,
        PREFERENCES_STORE,
        PAYEES_STORE,
        PRICE_DATA_STORE,
        TRANSACTION_DETAILS_STORE,
        COMPACTION_INFO_STORE,
        APP_STATE_STORE,
    ]
)
