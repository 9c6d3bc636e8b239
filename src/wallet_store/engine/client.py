"""WalletStorage — entry point owning the store manager and every service."""

from __future__ import annotations

from typing import TYPE_CHECKING

from wallet_store.config.settings import StorageConfig
from wallet_store.datastore.manager import StoreManager
from wallet_store.engine.services.compaction_service import CompactionService
from wallet_store.engine.services.payee_service import PayeeService
from wallet_store.engine.services.preferences_service import PreferencesService
from wallet_store.engine.services.presence_service import PresenceService
from wallet_store.engine.services.price_service import PriceService
from wallet_store.engine.services.transaction_details_service import TransactionDetailsService
from wallet_store.engine.services.wallet_service import WalletService

if TYPE_CHECKING:
    from wallet_store.errors.reporter import ErrorReporter


class WalletStorage:
    """Local persistence for one wallet install.

    Holds no open stores between calls: every service operation opens its
    store, does its work and closes it again. Service methods never raise
    for storage failures; they report them and return a neutral value.

    Usage::

        storage = WalletStorage(StorageConfig(data_dir=path))
        await storage.wallet.save_wallet(document, pin)
        document, error = await storage.wallet.load_wallet(pin)
    """

    def __init__(
        self,
        config: StorageConfig | None = None,
        reporter: ErrorReporter | None = None,
    ) -> None:
        self._config = config or StorageConfig()
        self._manager = StoreManager(self._config, reporter)

        self._wallet = WalletService(self)
        self._preferences = PreferencesService(self)
        self._payees = PayeeService(self)
        self._transaction_details = TransactionDetailsService(self)
        self._prices = PriceService(self)
        self._compaction = CompactionService(self)
        self._presence = PresenceService(self)

    @property
    def config(self) -> StorageConfig:
        return self._config

    @property
    def manager(self) -> StoreManager:
        return self._manager

    @property
    def wallet(self) -> WalletService:
        return self._wallet

    @property
    def preferences(self) -> PreferencesService:
        return self._preferences

    @property
    def payees(self) -> PayeeService:
        return self._payees

    @property
    def transaction_details(self) -> TransactionDetailsService:
        return self._transaction_details

    @property
    def prices(self) -> PriceService:
        return self._prices

    @property
    def compaction(self) -> CompactionService:
        return self._compaction

    @property
    def presence(self) -> PresenceService:
        return self._presence
