"""Shared test fixtures for the wallet-store test suite."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from pathlib import Path


class RecordingReporter:
    """Error reporter that keeps every report for assertions."""

    def __init__(self) -> None:
        self.reports: list[tuple[str, BaseException]] = []

    def report(self, message: str, error: BaseException) -> None:
        self.reports.append((message, error))

    @property
    def messages(self) -> list[str]:
        return [message for message, _ in self.reports]


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "wallet_data"


@pytest.fixture
def storage_config(data_dir):
    """Provide a StorageConfig writing into a per-test directory."""
    from wallet_store.config.settings import StorageConfig

    return StorageConfig(
        data_dir=data_dir,
        coin_name="Plenteum",
        currencies=["usd", "eur", "btc"],
        wallet_file_format_version=1,
    )


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def storage(storage_config, reporter):
    """Provide a WalletStorage wired to the test config and reporter."""
    from wallet_store.engine.client import WalletStorage

    return WalletStorage(storage_config, reporter)


@pytest.fixture
def manager(storage):
    return storage.manager


_TRANSACTION_INPUT: dict[str, Any] = {
    "keyImage": "ki-1",
    "amount": 5000,
    "blockHeight": 120,
    "transactionPublicKey": "tpk-1",
    "transactionIndex": 0,
    "globalOutputIndex": 77,
    "key": "out-key-1",
    "spendHeight": 0,
    "unlockTime": 0,
    "parentTransactionHash": "parent-1",
}


def _input(number: int) -> dict[str, Any]:
    item = dict(_TRANSACTION_INPUT)
    item.update(
        keyImage=f"ki-{number}",
        amount=1000 * number,
        key=f"out-key-{number}",
        parentTransactionHash=f"parent-{number}",
    )
    return item


_WALLET: dict[str, Any] = {
    "walletFileFormatVersion": 1,
    "subWallets": {
        "publicSpendKeys": ["spend-pub-1"],
        "subWallet": [
            {
                "publicSpendKey": "spend-pub-1",
                "privateSpendKey": "spend-priv-1",
                "syncStartTimestamp": 0,
                "syncStartHeight": 100,
                "address": "PLeaddress1",
                "isPrimaryAddress": True,
                "unspentInputs": [_input(1), _input(2)],
                "lockedInputs": [],
                "spentInputs": [],
                "unconfirmedIncomingAmounts": [],
            }
        ],
        "transactions": [
            {
                "hash": "tx-1",
                "fee": 10,
                "blockHeight": 120,
                "timestamp": 1546300800,
                "paymentID": "",
                "unlockTime": 0,
                "isCoinbaseTransaction": False,
                "transfers": [
                    {"amount": 1000, "publicKey": "spend-pub-1"},
                    {"amount": -10, "publicKey": "spend-pub-1"},
                ],
            }
        ],
        "lockedTransactions": [],
        "privateViewKey": "view-priv",
        "isViewWallet": False,
        "txPrivateKeys": [{"transactionHash": "tx-1", "txPrivateKey": "tx-priv-1"}],
    },
    "walletSynchronizer": {
        "startTimestamp": 0,
        "startHeight": 100,
        "privateViewKey": "view-priv",
        "transactionSynchronizerStatus": {
            "blockHashCheckpoints": ["cp-1", "cp-2"],
            "lastKnownBlockHashes": ["h-3", "h-2", "h-1"],
            "lastKnownBlockHeight": 120,
        },
    },
}


@pytest.fixture
def wallet_document() -> dict[str, Any]:
    """A wallet with one sub-wallet holding two unspent inputs."""
    return copy.deepcopy(_WALLET)


@pytest.fixture
def empty_wallet_document() -> dict[str, Any]:
    """A wallet whose every sequence is empty."""
    return {
        "walletFileFormatVersion": 1,
        "subWallets": {
            "publicSpendKeys": [],
            "subWallet": [],
            "transactions": [],
            "lockedTransactions": [],
            "privateViewKey": "view-priv",
            "isViewWallet": True,
            "txPrivateKeys": [],
        },
        "walletSynchronizer": {
            "startTimestamp": 0,
            "startHeight": 0,
            "privateViewKey": "view-priv",
            "transactionSynchronizerStatus": {
                "blockHashCheckpoints": [],
                "lastKnownBlockHashes": [],
                "lastKnownBlockHeight": 0,
            },
        },
    }
