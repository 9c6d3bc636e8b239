"""Wallet record tables — the encrypted nested object graph.

The graph is stored arena style: one table per nested entity, integer ids,
an owning-parent id column and a ``position`` column that keeps sequence
order. Where a parent owns two sequences of the same entity a ``collection``
tag tells them apart. Every data column is :class:`Sealed`, so the tables are
built per open around the cipher derived from the PIN.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, Integer, MetaData, String, Table

from wallet_store.engine.models.base import Sealed

if TYPE_CHECKING:
    from wallet_store.utils.crypto import StoreCipher

# Only one wallet is ever stored, so its key is constant.
WALLET_PRIMARY_KEY = 0

WALLET = "wallet"
SUB_WALLETS = "sub_wallets"
SUB_WALLET = "sub_wallet"
TRANSACTION_INPUT = "transaction_input"
UNCONFIRMED_INPUT = "unconfirmed_input"
TRANSACTION = "wallet_transaction"
TRANSFER = "transfer"
TX_PRIVATE_KEY = "tx_private_key"
WALLET_SYNCHRONIZER = "wallet_synchronizer"
SYNCHRONIZATION_STATUS = "synchronization_status"

# Parents before children: inserts run in this order, deletes in reverse.
TABLE_ORDER: tuple[str, ...] = (
    WALLET,
    SUB_WALLETS,
    SUB_WALLET,
    TRANSACTION_INPUT,
    UNCONFIRMED_INPUT,
    TRANSACTION,
    TRANSFER,
    TX_PRIVATE_KEY,
    WALLET_SYNCHRONIZER,
    SYNCHRONIZATION_STATUS,
)


def _owned(parent_column: str, parent: str, *, collection: bool = False) -> list[Column]:
    """Structural columns of a row exclusively owned by a *parent* row."""
    columns = [
        Column("id", Integer, primary_key=True, autoincrement=False),
        Column(
            parent_column,
            Integer,
            ForeignKey(f"{parent}.id"),
            nullable=False,
            index=True,
        ),
    ]
    if collection:
        columns.append(Column("collection", String(16), nullable=False))
    columns.append(Column("position", Integer, nullable=False))
    return columns


def build_wallet_metadata(cipher: StoreCipher) -> MetaData:
    """Declare the wallet store tables bound to *cipher*."""
    metadata = MetaData()
    sealed = Sealed(cipher)

    Table(
        WALLET,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=False),
        Column("wallet_file_format_version", Integer, nullable=False),
    )
    Table(
        SUB_WALLETS,
        metadata,
        *_owned("wallet_id", WALLET),
        Column("public_spend_keys", sealed),
        Column("private_view_key", sealed),
        Column("is_view_wallet", sealed),
    )
    Table(
        SUB_WALLET,
        metadata,
        *_owned("sub_wallets_id", SUB_WALLETS),
        Column("public_spend_key", sealed),
        Column("private_spend_key", sealed),
        Column("sync_start_timestamp", sealed),
        Column("sync_start_height", sealed),
        Column("address", sealed),
        Column("is_primary_address", sealed),
    )
    Table(
        TRANSACTION_INPUT,
        metadata,
        *_owned("sub_wallet_id", SUB_WALLET, collection=True),
        Column("key_image", sealed),
        Column("amount", sealed),
        Column("block_height", sealed),
        Column("transaction_public_key", sealed),
        Column("transaction_index", sealed),
        Column("global_output_index", sealed),
        Column("key", sealed),
        Column("spend_height", sealed),
        Column("unlock_time", sealed),
        Column("parent_transaction_hash", sealed),
    )
    Table(
        UNCONFIRMED_INPUT,
        metadata,
        *_owned("sub_wallet_id", SUB_WALLET),
        Column("amount", sealed),
        Column("key", sealed),
        Column("parent_transaction_hash", sealed),
    )
    Table(
        TRANSACTION,
        metadata,
        *_owned("sub_wallets_id", SUB_WALLETS, collection=True),
        Column("hash", sealed),
        Column("fee", sealed),
        Column("block_height", sealed),
        Column("timestamp", sealed),
        Column("payment_id", sealed),
        Column("unlock_time", sealed),
        Column("is_coinbase_transaction", sealed),
    )
    Table(
        TRANSFER,
        metadata,
        *_owned("transaction_id", TRANSACTION),
        Column("amount", sealed),
        Column("public_key", sealed),
    )
    Table(
        TX_PRIVATE_KEY,
        metadata,
        *_owned("sub_wallets_id", SUB_WALLETS),
        Column("transaction_hash", sealed),
        Column("tx_private_key", sealed),
    )
    Table(
        WALLET_SYNCHRONIZER,
        metadata,
        *_owned("wallet_id", WALLET),
        Column("start_timestamp", sealed),
        Column("start_height", sealed),
        Column("private_view_key", sealed),
    )
    Table(
        SYNCHRONIZATION_STATUS,
        metadata,
        *_owned("synchronizer_id", WALLET_SYNCHRONIZER),
        Column("block_hash_checkpoints", sealed),
        Column("last_known_block_hashes", sealed),
        Column("last_known_block_height", sealed),
    )
    return metadata
