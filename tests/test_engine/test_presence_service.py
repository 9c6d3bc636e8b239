"""Tests for PresenceService — the have-wallet flag."""

from __future__ import annotations

from wallet_store.engine.client import WalletStorage
from wallet_store.engine.models.app_state import AppStateEntry
from wallet_store.engine.registry import APP_STATE_STORE


class TestPresence:
    async def test_unset_is_false(self, storage) -> None:
        assert await storage.presence.get() is False

    async def test_set_true(self, storage) -> None:
        assert await storage.presence.set(True)
        assert await storage.presence.get() is True

    async def test_set_false_after_true(self, storage) -> None:
        await storage.presence.set(True)
        await storage.presence.set(False)
        assert await storage.presence.get() is False

    async def test_stored_under_product_key(self, storage) -> None:
        await storage.presence.set(True)

        async def _value(handle) -> str | None:
            entry = await handle.session.get(AppStateEntry, "PlenteumHaveWallet")
            return None if entry is None else entry.value

        assert await storage.manager.with_store(APP_STATE_STORE, _value) == "true"

    async def test_keys_are_per_product(self, storage, storage_config) -> None:
        await storage.presence.set(True)
        other = WalletStorage(storage_config.model_copy(update={"coin_name": "Other"}))
        assert await other.presence.get() is False

    async def test_unreadable_store_is_false(self, storage, storage_config) -> None:
        path = storage_config.store_path(APP_STATE_STORE.filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"garbage" * 200)
        assert await storage.presence.get() is False
