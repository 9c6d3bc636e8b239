"""Payee service — the address book, keyed by nickname."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, select

from wallet_store.engine.models.payee import Payee
from wallet_store.engine.registry import PAYEES_STORE
from wallet_store.engine.schemas import PayeeRecord

if TYPE_CHECKING:
    from collections.abc import Mapping

    from wallet_store.datastore.manager import StoreHandle
    from wallet_store.engine.client import WalletStorage


class PayeeService:
    """Saves, removes and lists payees.

    Saving a payee whose nickname already exists replaces it in place.
    """

    def __init__(self, storage: WalletStorage) -> None:
        self._storage = storage

    async def save_payee(self, payee: Mapping[str, Any]) -> bool:
        """Insert or update one payee by nickname."""

        async def _save(handle: StoreHandle) -> bool:
            record = PayeeRecord.model_validate(payee)
            async with handle.write() as session:
                await session.merge(Payee(**record.model_dump()))
            return True

        return await self._storage.manager.with_store(PAYEES_STORE, _save, default=False)

    async def remove_payee(self, nickname: str) -> bool:
        """Delete the payee called *nickname*. Removing an unknown one is a no-op."""

        async def _remove(handle: StoreHandle) -> bool:
            async with handle.write() as session:
                await session.execute(delete(Payee).where(Payee.nickname == nickname))
            return True

        return await self._storage.manager.with_store(PAYEES_STORE, _remove, default=False)

    async def load_payees(self) -> list[dict[str, Any]]:
        """Return every payee, ordered by nickname."""

        async def _load(handle: StoreHandle) -> list[dict[str, Any]]:
            result = await handle.session.execute(select(Payee).order_by(Payee.nickname))
            return [
                PayeeRecord(
                    nickname=row.nickname,
                    address=row.address,
                    payment_id=row.payment_id,
                ).model_dump(by_alias=True)
                for row in result.scalars()
            ]

        return await self._storage.manager.with_store(PAYEES_STORE, _load, default=[])
