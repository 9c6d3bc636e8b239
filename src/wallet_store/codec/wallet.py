"""Wallet JSON <-> persisted object graph.

The wallet backend hands over a single JSON document::

    {walletFileFormatVersion, subWallets: {...}, walletSynchronizer: {...}}

``encode`` validates it against the typed entity models in
:mod:`wallet_store.codec.documents`, then walks it parent-to-child and
allocates one row per nested entity in a :class:`WalletGraph`. ``decode``
rebuilds the models from the rows and dumps them back to camelCase JSON.
Sequence order is kept everywhere.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from wallet_store.codec.documents import (
    SubWallet,
    SubWallets,
    SynchronizationStatus,
    Transaction,
    TransactionInput,
    Transfer,
    TxPrivateKey,
    UnconfirmedInput,
    WalletDocument,
    WalletSynchronizer,
)
from wallet_store.codec.graph import Row, WalletGraph
from wallet_store.engine.models.wallet import (
    SUB_WALLET,
    SUB_WALLETS,
    SYNCHRONIZATION_STATUS,
    TRANSACTION,
    TRANSACTION_INPUT,
    TRANSFER,
    TX_PRIVATE_KEY,
    UNCONFIRMED_INPUT,
    WALLET,
    WALLET_PRIMARY_KEY,
    WALLET_SYNCHRONIZER,
)
from wallet_store.errors.store_errors import WalletFormatError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

# (model field, collection tag) for parents owning several sequences of one entity
INPUT_COLLECTIONS = (
    ("unspent_inputs", "unspent"),
    ("locked_inputs", "locked"),
    ("spent_inputs", "spent"),
)

TRANSACTION_COLLECTIONS = (
    ("transactions", "confirmed"),
    ("locked_transactions", "locked"),
)

# Fields stored as child rows rather than columns
_SUB_WALLET_CHILDREN = (
    *(field for field, _ in INPUT_COLLECTIONS),
    "unconfirmed_incoming_amounts",
)
_SUB_WALLETS_CHILDREN = (
    "sub_wallet",
    *(field for field, _ in TRANSACTION_COLLECTIONS),
    "tx_private_keys",
)


def _invalid(exc: ValidationError) -> WalletFormatError:
    first = exc.errors()[0]
    where = ".".join(str(part) for part in first["loc"]) or "wallet"
    return WalletFormatError(f"invalid wallet document at {where}: {first['msg']}")


def _columns(entity: BaseModel, exclude: Iterable[str] = ()) -> Row:
    return entity.model_dump(exclude=set(exclude))


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------


def _encode_sub_wallet(graph: WalletGraph, sub: SubWallet, parent_id: int, position: int) -> None:
    sub_wallet_id = graph.add(
        SUB_WALLET,
        {
            "sub_wallets_id": parent_id,
            "position": position,
            **_columns(sub, _SUB_WALLET_CHILDREN),
        },
    )
    for field, collection in INPUT_COLLECTIONS:
        for index, item in enumerate(getattr(sub, field)):
            graph.add(
                TRANSACTION_INPUT,
                {
                    "sub_wallet_id": sub_wallet_id,
                    "collection": collection,
                    "position": index,
                    **_columns(item),
                },
            )
    for index, item in enumerate(sub.unconfirmed_incoming_amounts):
        graph.add(
            UNCONFIRMED_INPUT,
            {"sub_wallet_id": sub_wallet_id, "position": index, **_columns(item)},
        )


def _encode_transaction(
    graph: WalletGraph, tx: Transaction, parent_id: int, collection: str, position: int
) -> None:
    transaction_id = graph.add(
        TRANSACTION,
        {
            "sub_wallets_id": parent_id,
            "collection": collection,
            "position": position,
            **_columns(tx, ("transfers",)),
        },
    )
    for index, item in enumerate(tx.transfers):
        graph.add(
            TRANSFER,
            {"transaction_id": transaction_id, "position": index, **_columns(item)},
        )


def _encode_sub_wallets(graph: WalletGraph, sub_wallets: SubWallets, wallet_id: int) -> None:
    sub_wallets_id = graph.add(
        SUB_WALLETS,
        {
            "wallet_id": wallet_id,
            "position": 0,
            **_columns(sub_wallets, _SUB_WALLETS_CHILDREN),
        },
    )
    for index, sub in enumerate(sub_wallets.sub_wallet):
        _encode_sub_wallet(graph, sub, sub_wallets_id, index)
    for field, collection in TRANSACTION_COLLECTIONS:
        for index, tx in enumerate(getattr(sub_wallets, field)):
            _encode_transaction(graph, tx, sub_wallets_id, collection, index)
    for index, item in enumerate(sub_wallets.tx_private_keys):
        graph.add(
            TX_PRIVATE_KEY,
            {"sub_wallets_id": sub_wallets_id, "position": index, **_columns(item)},
        )


def _encode_synchronizer(
    graph: WalletGraph, synchronizer: WalletSynchronizer, wallet_id: int
) -> None:
    synchronizer_id = graph.add(
        WALLET_SYNCHRONIZER,
        {
            "wallet_id": wallet_id,
            "position": 0,
            **_columns(synchronizer, ("transaction_synchronizer_status",)),
        },
    )
    graph.add(
        SYNCHRONIZATION_STATUS,
        {
            "synchronizer_id": synchronizer_id,
            "position": 0,
            **_columns(synchronizer.transaction_synchronizer_status),
        },
    )


def encode(document: Mapping[str, Any], *, format_version: int | None = None) -> WalletGraph:
    """Translate a wallet JSON document into a graph of rows.

    Args:
        document: Parsed wallet JSON.
        format_version: ``walletFileFormatVersion`` to stamp when the document
            carries none.

    Raises:
        WalletFormatError: If the document does not match the wallet shape:
            a missing field, a sequence that is not a list, or a value of the
            wrong type.
    """
    try:
        wallet = WalletDocument.model_validate(document)
    except ValidationError as exc:
        raise _invalid(exc) from exc

    version = wallet.wallet_file_format_version
    if version is None:
        version = format_version
    if version is None:
        msg = "wallet document has no walletFileFormatVersion"
        raise WalletFormatError(msg)

    graph = WalletGraph()
    wallet_id = graph.add(
        WALLET,
        {"wallet_file_format_version": version},
        row_id=WALLET_PRIMARY_KEY,
    )
    _encode_sub_wallets(graph, wallet.sub_wallets, wallet_id)
    _encode_synchronizer(graph, wallet.wallet_synchronizer, wallet_id)
    return graph


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------


def _decode_sub_wallet(graph: WalletGraph, row: Row) -> SubWallet:
    children: dict[str, Any] = {
        field: [
            TransactionInput.model_validate(item)
            for item in graph.children(TRANSACTION_INPUT, "sub_wallet_id", row["id"], collection)
        ]
        for field, collection in INPUT_COLLECTIONS
    }
    children["unconfirmed_incoming_amounts"] = [
        UnconfirmedInput.model_validate(item)
        for item in graph.children(UNCONFIRMED_INPUT, "sub_wallet_id", row["id"])
    ]
    return SubWallet.model_validate({**row, **children})


def _decode_transaction(graph: WalletGraph, row: Row) -> Transaction:
    transfers = [
        Transfer.model_validate(item)
        for item in graph.children(TRANSFER, "transaction_id", row["id"])
    ]
    return Transaction.model_validate({**row, "transfers": transfers})


def _decode_sub_wallets(graph: WalletGraph, row: Row) -> SubWallets:
    children: dict[str, Any] = {
        field: [
            _decode_transaction(graph, item)
            for item in graph.children(TRANSACTION, "sub_wallets_id", row["id"], collection)
        ]
        for field, collection in TRANSACTION_COLLECTIONS
    }
    children["sub_wallet"] = [
        _decode_sub_wallet(graph, item)
        for item in graph.children(SUB_WALLET, "sub_wallets_id", row["id"])
    ]
    children["tx_private_keys"] = [
        TxPrivateKey.model_validate(item)
        for item in graph.children(TX_PRIVATE_KEY, "sub_wallets_id", row["id"])
    ]
    return SubWallets.model_validate({**row, **children})


def _decode_synchronizer(graph: WalletGraph, row: Row) -> WalletSynchronizer:
    status = graph.one(SYNCHRONIZATION_STATUS, "synchronizer_id", row["id"])
    return WalletSynchronizer.model_validate(
        {**row, "transaction_synchronizer_status": SynchronizationStatus.model_validate(status)}
    )


def decode(graph: WalletGraph) -> dict[str, Any]:
    """Rebuild the wallet JSON document from a graph of rows.

    Raises:
        WalletFormatError: If a singleton entity is missing or duplicated, or
            a stored value no longer matches its entity model.
    """
    wallet = graph.one(WALLET, "id", WALLET_PRIMARY_KEY)
    sub_wallets = graph.one(SUB_WALLETS, "wallet_id", wallet["id"])
    synchronizer = graph.one(WALLET_SYNCHRONIZER, "wallet_id", wallet["id"])
    try:
        document = WalletDocument(
            wallet_file_format_version=wallet["wallet_file_format_version"],
            sub_wallets=_decode_sub_wallets(graph, sub_wallets),
            wallet_synchronizer=_decode_synchronizer(graph, synchronizer),
        )
    except ValidationError as exc:
        raise _invalid(exc) from exc
    return document.model_dump(by_alias=True)
