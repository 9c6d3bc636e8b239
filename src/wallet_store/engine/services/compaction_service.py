"""Compaction scheduler — periodic space reclamation across all stores.

A pass compacts the stores one after another. It is not transactional
across stores: when one fails, the ones before it stay compacted and the
ones after it are skipped.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import select

from wallet_store.engine.models.compaction import COMPACTION_INFO_PRIMARY_KEY, CompactionInfo
from wallet_store.engine.registry import (
    COMPACTION_INFO_STORE,
    PAYEES_STORE,
    PREFERENCES_STORE,
    PRICE_DATA_STORE,
    TRANSACTION_DETAILS_STORE,
    WALLET_STORE,
)
from wallet_store.utils.crypto import derive_key

if TYPE_CHECKING:
    from wallet_store.datastore.manager import StoreHandle
    from wallet_store.engine.client import WalletStorage
    from wallet_store.engine.registry import StoreSchema
    from wallet_store.errors.store_errors import StoreError

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

COMPACTION_ORDER: tuple[StoreSchema, ...] = (
    TRANSACTION_DETAILS_STORE,
    PAYEES_STORE,
    PRICE_DATA_STORE,
    PREFERENCES_STORE,
    WALLET_STORE,
)


class CompactionStatus(enum.StrEnum):
    """Per-store outcome of a compaction pass."""

    COMPACTED = "compacted"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class CompactionReport:
    """Per-store results of one pass, in compaction order."""

    results: dict[str, CompactionStatus] = field(default_factory=dict)
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and all(
            status is CompactionStatus.COMPACTED for status in self.results.values()
        )

    @property
    def failed_store(self) -> str | None:
        for name, status in self.results.items():
            if status is CompactionStatus.FAILED:
                return name
        return None


async def _compact(handle: StoreHandle) -> None:
    await handle.compact()


class CompactionService:
    """Decides when to compact and runs compaction passes."""

    def __init__(self, storage: WalletStorage) -> None:
        self._storage = storage

    async def last_compacted(self) -> datetime:
        """When the stores were last compacted; the epoch if never or unreadable."""

        async def _load(handle: StoreHandle) -> datetime:
            result = await handle.session.execute(
                select(CompactionInfo.last_updated).where(
                    CompactionInfo.primary_key == COMPACTION_INFO_PRIMARY_KEY
                )
            )
            return result.scalar_one_or_none() or EPOCH

        return await self._storage.manager.with_store(COMPACTION_INFO_STORE, _load, default=EPOCH)

    async def record_compaction(self, when: datetime | None = None) -> bool:
        """Store *when* (default: now) as the last compaction time."""
        when = when or datetime.now(tz=UTC)

        async def _save(handle: StoreHandle) -> bool:
            async with handle.write() as session:
                await session.merge(
                    CompactionInfo(primary_key=COMPACTION_INFO_PRIMARY_KEY, last_updated=when)
                )
            return True

        return await self._storage.manager.with_store(COMPACTION_INFO_STORE, _save, default=False)

    async def should_compact(
        self,
        min_interval_days: int | None = None,
        *,
        now: datetime | None = None,
    ) -> bool:
        """True when strictly more than *min_interval_days* have passed.

        Exactly *min_interval_days* since the last pass is not enough.
        """
        if min_interval_days is None:
            min_interval_days = self._storage.config.compaction_interval_days
        now = now or datetime.now(tz=UTC)
        elapsed = now - await self.last_compacted()
        return elapsed > timedelta(days=min_interval_days)

    async def compact_stores(self, pin: object) -> CompactionReport:
        """Compact every store in order, stopping at the first failure."""
        logger.info("Attempting to compact stores...")
        manager = self._storage.manager
        key = derive_key(pin)
        report = CompactionReport()

        for schema in COMPACTION_ORDER:
            if report.error is not None:
                report.results[schema.name] = CompactionStatus.SKIPPED
                continue
            if not manager.exists(schema):
                # Nothing on disk yet, nothing to reclaim.
                report.results[schema.name] = CompactionStatus.COMPACTED
                continue
            result = await manager.run(
                schema,
                _compact,
                key=key if schema.encrypted else None,
                create=False,
            )
            if result.ok:
                report.results[schema.name] = CompactionStatus.COMPACTED
            else:
                report.results[schema.name] = CompactionStatus.FAILED
                report.error = result.error

        if report.ok:
            logger.info("Compacted %d stores", len(report.results))
        else:
            logger.warning("Failed to compact stores: %s store failed", report.failed_store)
        return report

    async def compact_all(self, pin: object) -> bool:
        """Run a compaction pass; True only if every store was compacted."""
        report = await self.compact_stores(pin)
        return report.ok

    async def compact_if_due(
        self,
        pin: object,
        min_interval_days: int | None = None,
        *,
        now: datetime | None = None,
    ) -> bool:
        """Compact when due and record the time of a successful pass.

        Returns:
            True if a pass ran and succeeded.
        """
        now = now or datetime.now(tz=UTC)
        if not await self.should_compact(min_interval_days, now=now):
            return False
        if not await self.compact_all(pin):
            return False
        await self.record_compaction(now)
        return True
