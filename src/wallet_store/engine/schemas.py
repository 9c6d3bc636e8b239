"""Pydantic schemas for the JSON records the UI saves and loads.

These define the boundary contract (camelCase keys as the UI uses them).
They deliberately do NOT inherit from SQLAlchemy models; the services map
between ORM objects and these schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PreferencesRecord(_Record):
    """User preferences as saved by the settings screen."""

    currency: str
    notifications_enabled: bool = Field(alias="notificationsEnabled")
    scan_coinbase_transactions: bool = Field(alias="scanCoinbaseTransactions")
    limit_data: bool = Field(alias="limitData")
    theme: str
    pin_confirmation: bool = Field(alias="pinConfirmation")


class PayeeRecord(_Record):
    """Address book entry."""

    nickname: str = Field(min_length=1)
    address: str
    payment_id: str = Field(default="", alias="paymentID")


class TransactionDetailsRecord(_Record):
    """User notes for one transaction."""

    hash: str = Field(min_length=1)
    memo: str = ""
    address: str = ""
    payee: str = ""
