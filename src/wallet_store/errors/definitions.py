"""Shared error instances returned as result sentinels."""

from __future__ import annotations

from wallet_store.errors.store_errors import (
    StoreNotFoundError,
    StoreOpenError,
    WalletNotFoundError,
)

# -- Wallet ----------------------------------------------------------------

ErrWalletNotFound = WalletNotFoundError("Wallet not present in database")

# -- Stores ----------------------------------------------------------------

ErrStoreMissing = StoreNotFoundError("store file does not exist")
ErrKeyRequired = StoreOpenError("store is encrypted and no key was supplied")
