"""Price service — cached exchange rates, one value per configured currency."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert

from wallet_store.engine.models.price_data import PRICE_DATA, PRICE_DATA_PRIMARY_KEY
from wallet_store.engine.registry import PRICE_DATA_STORE

if TYPE_CHECKING:
    from collections.abc import Mapping

    from wallet_store.datastore.manager import StoreHandle
    from wallet_store.engine.client import WalletStorage

logger = logging.getLogger(__name__)


class PriceService:
    """Saves and loads the price cache singleton (key 1).

    The set of currencies comes from configuration; the table is rebuilt
    empty when that set changes.
    """

    def __init__(self, storage: WalletStorage) -> None:
        self._storage = storage

    @property
    def currencies(self) -> list[str]:
        return self._storage.config.currencies

    async def save_prices(self, prices: Mapping[str, float | None]) -> bool:
        """Replace the cached prices.

        Codes outside the configured list are dropped; configured codes
        missing from *prices* are stored as NULL.
        """
        currencies = self.currencies

        async def _save(handle: StoreHandle) -> bool:
            given = {str(code).lower(): value for code, value in prices.items()}
            given.pop("primarykey", None)
            unknown = sorted(set(given) - set(currencies))
            if unknown:
                logger.warning("Ignoring prices for unconfigured currencies: %s", ", ".join(unknown))
            values = {
                code: None if given.get(code) is None else float(given[code])
                for code in currencies
            }

            table = handle.table(PRICE_DATA)
            stmt = insert(table).values(primary_key=PRICE_DATA_PRIMARY_KEY, **values)
            if values:
                stmt = stmt.on_conflict_do_update(index_elements=[table.c.primary_key], set_=values)
            else:
                stmt = stmt.on_conflict_do_nothing(index_elements=[table.c.primary_key])
            async with handle.write() as session:
                await session.execute(stmt)
            return True

        return await self._storage.manager.with_store(PRICE_DATA_STORE, _save, default=False)

    async def load_prices(self) -> dict[str, float] | None:
        """Return ``{currency: price}`` for every cached price, or None."""
        currencies = self.currencies

        async def _load(handle: StoreHandle) -> dict[str, float] | None:
            table = handle.table(PRICE_DATA)
            result = await handle.session.execute(
                select(table).where(table.c.primary_key == PRICE_DATA_PRIMARY_KEY)
            )
            row: Any = result.mappings().one_or_none()
            if row is None:
                return None
            return {code: row[code] for code in currencies if row[code] is not None}

        return await self._storage.manager.with_store(PRICE_DATA_STORE, _load)
