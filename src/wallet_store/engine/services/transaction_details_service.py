"""Transaction details service — memos and payees attached to transactions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, select

from wallet_store.engine.models.transaction_details import TransactionDetails
from wallet_store.engine.registry import TRANSACTION_DETAILS_STORE
from wallet_store.engine.schemas import TransactionDetailsRecord

if TYPE_CHECKING:
    from collections.abc import Mapping

    from wallet_store.datastore.manager import StoreHandle
    from wallet_store.engine.client import WalletStorage


class TransactionDetailsService:
    """Saves, removes and lists per-transaction details keyed by hash."""

    def __init__(self, storage: WalletStorage) -> None:
        self._storage = storage

    async def save_details(self, details: Mapping[str, Any]) -> bool:
        """Insert or update the details of one transaction."""

        async def _save(handle: StoreHandle) -> bool:
            record = TransactionDetailsRecord.model_validate(details)
            async with handle.write() as session:
                await session.merge(TransactionDetails(**record.model_dump()))
            return True

        return await self._storage.manager.with_store(
            TRANSACTION_DETAILS_STORE, _save, default=False
        )

    async def remove_details(self, tx_hash: str) -> bool:
        """Delete the details stored for *tx_hash*, if any."""

        async def _remove(handle: StoreHandle) -> bool:
            async with handle.write() as session:
                await session.execute(
                    delete(TransactionDetails).where(TransactionDetails.hash == tx_hash)
                )
            return True

        return await self._storage.manager.with_store(
            TRANSACTION_DETAILS_STORE, _remove, default=False
        )

    async def load_details(self) -> list[dict[str, Any]]:
        """Return the details of every annotated transaction."""

        async def _load(handle: StoreHandle) -> list[dict[str, Any]]:
            result = await handle.session.execute(
                select(TransactionDetails).order_by(TransactionDetails.hash)
            )
            return [
                TransactionDetailsRecord(
                    hash=row.hash,
                    memo=row.memo,
                    address=row.address,
                    payee=row.payee,
                ).model_dump(by_alias=True)
                for row in result.scalars()
            ]

        return await self._storage.manager.with_store(
            TRANSACTION_DETAILS_STORE, _load, default=[]
        )
