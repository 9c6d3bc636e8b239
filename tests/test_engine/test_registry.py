"""Tests for the store schema registry."""

from __future__ import annotations

import pytest
from sqlalchemy import MetaData

from wallet_store.engine.models.price_data import build_price_metadata
from wallet_store.engine.registry import (
    STORE_SCHEMAS,
    WALLET_STORE,
    MigrationPolicy,
    SchemaContext,
    StoreSchema,
    _audit,
)
from wallet_store.utils.crypto import StoreCipher, derive_key


class TestRegistry:
    """Declared stores."""

    def test_all_stores_declared(self) -> None:
        assert set(STORE_SCHEMAS) == {
            "wallet",
            "preferences",
            "payees",
            "price-data",
            "transaction-details",
            "compaction-info",
            "app-state",
        }

    def test_one_file_per_store(self) -> None:
        filenames = [schema.filename for schema in STORE_SCHEMAS.values()]
        assert len(filenames) == len(set(filenames))

    def test_only_wallet_encrypted(self) -> None:
        encrypted = [name for name, schema in STORE_SCHEMAS.items() if schema.encrypted]
        assert encrypted == ["wallet"]

    def test_wallet_fails_on_drift(self) -> None:
        assert WALLET_STORE.migration is MigrationPolicy.FAIL

    def test_secondary_stores_destructive(self) -> None:
        for name, schema in STORE_SCHEMAS.items():
            if name != "wallet":
                assert schema.migration is MigrationPolicy.DESTRUCTIVE

    def test_wallet_metadata_needs_cipher(self) -> None:
        with pytest.raises(ValueError, match="cipher"):
            WALLET_STORE.build_metadata(SchemaContext())

    def test_wallet_metadata_tables(self) -> None:
        cipher = StoreCipher(derive_key("1234"))
        metadata = WALLET_STORE.build_metadata(SchemaContext(cipher=cipher))
        assert "wallet" in metadata.tables
        assert "synchronization_status" in metadata.tables

    def test_price_metadata_from_currencies(self) -> None:
        metadata = STORE_SCHEMAS["price-data"].build_metadata(SchemaContext(currencies=("usd",)))
        assert set(metadata.tables["price_data"].columns.keys()) == {"primary_key", "usd"}

    def test_price_code_cannot_shadow_key(self) -> None:
        with pytest.raises(ValueError, match="primary_key"):
            build_price_metadata(["primary_key"])


class TestAudit:
    """Registry audit rejects unsafe declarations."""

    def test_encrypted_destructive_rejected(self) -> None:
        schema = StoreSchema(
            name="secret",
            filename="secret.db",
            build_metadata=lambda _context: MetaData(),
            migration=MigrationPolicy.DESTRUCTIVE,
            encrypted=True,
        )
        with pytest.raises(ValueError, match="destructive"):
            _audit([schema])

    def test_duplicate_rejected(self) -> None:
        with pytest.raises(ValueError, match="twice"):
            _audit([WALLET_STORE, WALLET_STORE])
