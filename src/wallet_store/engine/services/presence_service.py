"""Presence flag — whether a wallet has ever been saved on this device.

Queried at startup, before a PIN is known, to choose between the unlock
screen and wallet creation/import. Lives in the plaintext app-state store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wallet_store.engine.models.app_state import AppStateEntry
from wallet_store.engine.registry import APP_STATE_STORE

if TYPE_CHECKING:
    from wallet_store.datastore.manager import StoreHandle
    from wallet_store.engine.client import WalletStorage


class PresenceService:
    """Stores ``"true"`` / ``"false"`` under the product's have-wallet key."""

    def __init__(self, storage: WalletStorage) -> None:
        self._storage = storage

    @property
    def key(self) -> str:
        return self._storage.config.presence_key

    async def set(self, have_wallet: bool) -> bool:
        """Record whether a wallet exists. Returns True if stored."""
        value = "true" if have_wallet else "false"

        async def _set(handle: StoreHandle) -> bool:
            async with handle.write() as session:
                await session.merge(AppStateEntry(key=self.key, value=value))
            return True

        return await self._storage.manager.with_store(APP_STATE_STORE, _set, default=False)

    async def get(self) -> bool:
        """Whether a wallet was saved; False when unset or unreadable."""

        async def _get(handle: StoreHandle) -> bool:
            entry = await handle.session.get(AppStateEntry, self.key)
            return entry is not None and entry.value == "true"

        return await self._storage.manager.with_store(APP_STATE_STORE, _get, default=False)
