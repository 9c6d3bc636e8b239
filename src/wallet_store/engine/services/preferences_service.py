"""Preferences service — the user settings singleton."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from wallet_store.engine.models.preferences import PREFERENCES_PRIMARY_KEY, Preferences
from wallet_store.engine.registry import PREFERENCES_STORE
from wallet_store.engine.schemas import PreferencesRecord

if TYPE_CHECKING:
    from collections.abc import Mapping

    from wallet_store.datastore.manager import StoreHandle
    from wallet_store.engine.client import WalletStorage


class PreferencesService:
    """Saves and loads the single Preferences row (key 1)."""

    def __init__(self, storage: WalletStorage) -> None:
        self._storage = storage

    async def save_preferences(self, preferences: Mapping[str, Any]) -> bool:
        """Replace the stored preferences.

        Returns:
            True if the write committed.
        """

        async def _save(handle: StoreHandle) -> bool:
            record = PreferencesRecord.model_validate(preferences)
            async with handle.write() as session:
                await session.merge(
                    Preferences(primary_key=PREFERENCES_PRIMARY_KEY, **record.model_dump())
                )
            return True

        return await self._storage.manager.with_store(PREFERENCES_STORE, _save, default=False)

    async def load_preferences(self) -> dict[str, Any] | None:
        """Return the stored preferences, or None if never saved."""

        async def _load(handle: StoreHandle) -> dict[str, Any] | None:
            result = await handle.session.execute(
                select(Preferences).where(Preferences.primary_key == PREFERENCES_PRIMARY_KEY)
            )
            row = result.scalar_one_or_none()
            if row is None:
                return None
            record = PreferencesRecord(
                currency=row.currency,
                notifications_enabled=row.notifications_enabled,
                scan_coinbase_transactions=row.scan_coinbase_transactions,
                limit_data=row.limit_data,
                theme=row.theme,
                pin_confirmation=row.pin_confirmation,
            )
            return record.model_dump(by_alias=True)

        return await self._storage.manager.with_store(PREFERENCES_STORE, _load)
