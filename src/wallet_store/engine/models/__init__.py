"""Store data models (SQLAlchemy).

Statically shaped stores use ORM declarative models, each with its own
declarative base so every store file has an independent ``MetaData``.
The wallet graph and the price cache are declared at open time.
"""

from wallet_store.engine.models.app_state import AppStateBase, AppStateEntry
from wallet_store.engine.models.base import Sealed, UTCDateTime
from wallet_store.engine.models.compaction import (
    COMPACTION_INFO_PRIMARY_KEY,
    CompactionInfo,
    CompactionInfoBase,
)
from wallet_store.engine.models.payee import Payee, PayeeBase
from wallet_store.engine.models.preferences import (
    PREFERENCES_PRIMARY_KEY,
    Preferences,
    PreferencesBase,
)
from wallet_store.engine.models.price_data import (
    PRICE_DATA,
    PRICE_DATA_PRIMARY_KEY,
    build_price_metadata,
)
from wallet_store.engine.models.transaction_details import (
    TransactionDetails,
    TransactionDetailsBase,
)
from wallet_store.engine.models.wallet import (
    TABLE_ORDER,
    WALLET_PRIMARY_KEY,
    build_wallet_metadata,
)

__all__ = [
    "COMPACTION_INFO_PRIMARY_KEY",
    "PREFERENCES_PRIMARY_KEY",
    "PRICE_DATA",
    "PRICE_DATA_PRIMARY_KEY",
    "TABLE_ORDER",
    "WALLET_PRIMARY_KEY",
    "AppStateBase",
    "AppStateEntry",
    "CompactionInfo",
    "CompactionInfoBase",
    "Payee",
    "PayeeBase",
    "Preferences",
    "PreferencesBase",
    "Sealed",
    "TransactionDetails",
    "TransactionDetailsBase",
    "UTCDateTime",
    "build_price_metadata",
    "build_wallet_metadata",
]
