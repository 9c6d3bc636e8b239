"""Wallet service — the encrypted wallet document.

The wallet is persisted as a graph of rows (see :mod:`wallet_store.codec`)
in a store sealed with the key derived from the user's PIN. Saving replaces
the whole graph in one transaction; loading rebuilds the JSON document.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select

from wallet_store.codec import WalletGraph, decode, encode
from wallet_store.engine.models.wallet import TABLE_ORDER, WALLET
from wallet_store.engine.registry import WALLET_STORE
from wallet_store.errors.definitions import ErrWalletNotFound
from wallet_store.errors.store_errors import WalletFormatError
from wallet_store.utils.crypto import derive_key

if TYPE_CHECKING:
    from collections.abc import Mapping

    from wallet_store.datastore.manager import StoreHandle
    from wallet_store.engine.client import WalletStorage
    from wallet_store.errors.store_errors import StoreError

logger = logging.getLogger(__name__)


def _parse(wallet: Mapping[str, Any] | str) -> Mapping[str, Any]:
    if not isinstance(wallet, str):
        return wallet
    try:
        return json.loads(wallet)
    except ValueError as exc:
        msg = "wallet document is not valid JSON"
        raise WalletFormatError(msg) from exc


class WalletService:
    """Saves and loads the wallet singleton."""

    def __init__(self, storage: WalletStorage) -> None:
        self._storage = storage

    async def save_wallet(self, wallet: Mapping[str, Any] | str, pin: object) -> bool:
        """Encrypt and store *wallet*, replacing any stored wallet.

        Args:
            wallet: The wallet JSON document, parsed or as a string.
            pin: The user's PIN; the store key is derived from it.

        Returns:
            True if the write committed. On success the presence flag is set.
        """
        manager = self._storage.manager
        format_version = self._storage.config.wallet_file_format_version
        try:
            graph = encode(_parse(wallet), format_version=format_version)
        except WalletFormatError as exc:
            manager.report_error(WALLET_STORE, exc)
            return False

        async def _save(handle: StoreHandle) -> bool:
            async with handle.write() as session:
                for name in reversed(TABLE_ORDER):
                    await session.execute(delete(handle.table(name)))
                for name in TABLE_ORDER:
                    rows = graph.rows(name)
                    if rows:
                        await session.execute(insert(handle.table(name)), rows)
            logger.debug("Saved wallet graph of %d rows", len(graph))
            return True

        saved = await manager.with_store(WALLET_STORE, _save, key=derive_key(pin), default=False)
        if saved:
            await self._storage.presence.set(True)
        return saved

    async def load_wallet(self, pin: object) -> tuple[dict[str, Any] | None, StoreError | None]:
        """Decrypt and rebuild the stored wallet.

        Returns:
            ``(document, None)`` on success, otherwise ``(None, error)``. A
            wrong PIN and a damaged store both come back as a
            ``StoreOpenError``; no wallet yet as ``ErrWalletNotFound``.
        """
        manager = self._storage.manager
        if not manager.exists(WALLET_STORE):
            return None, ErrWalletNotFound

        async def _load(handle: StoreHandle) -> dict[str, Any] | None:
            graph = WalletGraph()
            for name in TABLE_ORDER:
                table = handle.table(name)
                result = await handle.session.execute(select(table).order_by(table.c.id))
                graph.tables[name] = [dict(row) for row in result.mappings()]
            if not graph.rows(WALLET):
                return None
            return decode(graph)

        result = await manager.run(WALLET_STORE, _load, key=derive_key(pin), create=False)
        if not result.ok:
            return None, result.error
        if result.value is None:
            return None, ErrWalletNotFound

        document = result.value
        stored_version = document["walletFileFormatVersion"]
        supported = self._storage.config.wallet_file_format_version
        if isinstance(stored_version, int) and stored_version > supported:
            logger.warning(
                "Stored wallet format version %d is newer than supported version %d",
                stored_version,
                supported,
            )
        return document, None

    async def load_wallet_json(self, pin: object) -> tuple[str | None, StoreError | None]:
        """Same as :meth:`load_wallet`, serialised back to a JSON string."""
        document, error = await self.load_wallet(pin)
        if document is None:
            return None, error
        return json.dumps(document), None
