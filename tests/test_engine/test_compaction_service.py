"""Tests for CompactionService — scheduling and compaction passes."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from wallet_store.engine.registry import PAYEES_STORE, WALLET_STORE
from wallet_store.engine.services.compaction_service import (
    COMPACTION_ORDER,
    EPOCH,
    CompactionReport,
    CompactionStatus,
)

_PIN = "1234"
_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


async def _populate(storage, wallet_document) -> None:
    await storage.wallet.save_wallet(wallet_document, _PIN)
    await storage.preferences.save_preferences(
        {
            "currency": "usd",
            "notificationsEnabled": True,
            "scanCoinbaseTransactions": False,
            "limitData": False,
            "theme": "darkMode",
            "pinConfirmation": False,
        }
    )
    for index in range(20):
        await storage.payees.save_payee({"nickname": f"payee-{index}", "address": "PLE" * 30})
    for index in range(15):
        await storage.payees.remove_payee(f"payee-{index}")
    await storage.transaction_details.save_details({"hash": "aa", "memo": "rent"})
    await storage.prices.save_prices({"usd": 1.0})


async def _snapshot(storage) -> tuple:
    wallet, _ = await storage.wallet.load_wallet(_PIN)
    return (
        wallet,
        await storage.preferences.load_preferences(),
        await storage.payees.load_payees(),
        await storage.transaction_details.load_details(),
        await storage.prices.load_prices(),
    )


class TestLastCompacted:
    async def test_epoch_when_never_compacted(self, storage) -> None:
        assert await storage.compaction.last_compacted() == EPOCH

    async def test_record_and_read(self, storage) -> None:
        assert await storage.compaction.record_compaction(_NOW)
        assert await storage.compaction.last_compacted() == _NOW

    async def test_record_overwrites(self, storage) -> None:
        await storage.compaction.record_compaction(_NOW)
        later = _NOW + timedelta(days=1)
        await storage.compaction.record_compaction(later)
        assert await storage.compaction.last_compacted() == later

    async def test_naive_time_treated_as_utc(self, storage) -> None:
        await storage.compaction.record_compaction(_NOW.replace(tzinfo=None))
        assert await storage.compaction.last_compacted() == _NOW


class TestShouldCompact:
    """Threshold boundary."""

    async def test_never_compacted_is_due(self, storage) -> None:
        assert await storage.compaction.should_compact(7, now=_NOW)

    async def test_exactly_interval_is_not_due(self, storage) -> None:
        await storage.compaction.record_compaction(_NOW - timedelta(days=7))
        assert not await storage.compaction.should_compact(7, now=_NOW)

    async def test_just_over_interval_is_due(self, storage) -> None:
        await storage.compaction.record_compaction(_NOW - timedelta(days=7, seconds=1))
        assert await storage.compaction.should_compact(7, now=_NOW)

    async def test_fractional_day_over_interval_is_due(self, storage) -> None:
        await storage.compaction.record_compaction(_NOW - timedelta(days=7.5))
        assert await storage.compaction.should_compact(7, now=_NOW)

    async def test_recent_is_not_due(self, storage) -> None:
        await storage.compaction.record_compaction(_NOW - timedelta(days=1))
        assert not await storage.compaction.should_compact(7, now=_NOW)

    async def test_default_interval_from_config(self, storage) -> None:
        assert storage.config.compaction_interval_days == 7
        await storage.compaction.record_compaction(_NOW - timedelta(days=7))
        assert not await storage.compaction.should_compact(now=_NOW)
        await storage.compaction.record_compaction(_NOW - timedelta(days=8))
        assert await storage.compaction.should_compact(now=_NOW)


class TestCompactStores:
    """Compaction passes."""

    async def test_order(self) -> None:
        assert [schema.name for schema in COMPACTION_ORDER] == [
            "transaction-details",
            "payees",
            "price-data",
            "preferences",
            "wallet",
        ]

    async def test_all_compacted(self, storage, wallet_document) -> None:
        await _populate(storage, wallet_document)
        report = await storage.compaction.compact_stores(_PIN)
        assert report.ok
        assert report.error is None
        assert set(report.results.values()) == {CompactionStatus.COMPACTED}

    async def test_missing_stores_count_as_compacted(self, storage) -> None:
        report = await storage.compaction.compact_stores(_PIN)
        assert report.ok
        assert not storage.manager.exists(PAYEES_STORE)

    async def test_idempotent(self, storage, wallet_document) -> None:
        await _populate(storage, wallet_document)
        before = await _snapshot(storage)

        assert await storage.compaction.compact_all(_PIN)
        first = await _snapshot(storage)
        assert await storage.compaction.compact_all(_PIN)
        second = await _snapshot(storage)

        assert first == before
        assert second == first

    async def test_wrong_pin_fails_on_wallet(self, storage, wallet_document, reporter) -> None:
        await _populate(storage, wallet_document)

        report = await storage.compaction.compact_stores("0000")

        assert not report.ok
        assert report.failed_store == WALLET_STORE.name
        assert report.results["payees"] is CompactionStatus.COMPACTED
        assert report.error is not None
        assert report.error.code == "open-failure"
        assert reporter.messages == ["Error interacting with wallet store (open-failure)"]

    async def test_failure_skips_later_stores(self, storage, storage_config, wallet_document) -> None:
        await _populate(storage, wallet_document)
        path = storage_config.store_path(PAYEES_STORE.filename)
        path.write_bytes(b"garbage" * 500)

        report = await storage.compaction.compact_stores(_PIN)

        assert report.results == {
            "transaction-details": CompactionStatus.COMPACTED,
            "payees": CompactionStatus.FAILED,
            "price-data": CompactionStatus.SKIPPED,
            "preferences": CompactionStatus.SKIPPED,
            "wallet": CompactionStatus.SKIPPED,
        }
        assert report.failed_store == "payees"
        assert not await storage.compaction.compact_all(_PIN)

    async def test_logs_pass(self, storage, caplog) -> None:
        with caplog.at_level(logging.INFO):
            await storage.compaction.compact_stores(_PIN)
        assert "Attempting to compact stores" in caplog.text


class TestCompactionReport:
    def test_empty_report_is_ok(self) -> None:
        assert CompactionReport().ok

    def test_failed_store(self) -> None:
        report = CompactionReport(
            results={"a": CompactionStatus.COMPACTED, "b": CompactionStatus.FAILED}
        )
        assert report.failed_store == "b"


class TestCompactIfDue:
    async def test_runs_and_records_when_due(self, storage) -> None:
        assert await storage.compaction.compact_if_due(_PIN, now=_NOW)
        assert await storage.compaction.last_compacted() == _NOW

    async def test_skips_when_not_due(self, storage) -> None:
        recent = _NOW - timedelta(days=2)
        await storage.compaction.record_compaction(recent)
        assert not await storage.compaction.compact_if_due(_PIN, now=_NOW)
        assert await storage.compaction.last_compacted() == recent

    async def test_failed_pass_not_recorded(self, storage, wallet_document) -> None:
        await storage.wallet.save_wallet(wallet_document, _PIN)
        assert not await storage.compaction.compact_if_due("0000", now=_NOW)
        assert await storage.compaction.last_compacted() == EPOCH
