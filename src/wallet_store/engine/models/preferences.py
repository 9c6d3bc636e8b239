"""Preferences model — the single row of user settings."""

from __future__ import annotations

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

PREFERENCES_PRIMARY_KEY = 1


class PreferencesBase(DeclarativeBase):
    """Declarative base of the preferences store."""


class Preferences(PreferencesBase):
    """User preferences, always stored under :data:`PREFERENCES_PRIMARY_KEY`."""

    __tablename__ = "preferences"

    primary_key: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False, default=PREFERENCES_PRIMARY_KEY
    )
    currency: Mapped[str] = mapped_column(String(16), nullable=False)
    notifications_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False)
    scan_coinbase_transactions: Mapped[bool] = mapped_column(Boolean, nullable=False)
    limit_data: Mapped[bool] = mapped_column(Boolean, nullable=False)
    theme: Mapped[str] = mapped_column(String(32), nullable=False)
    pin_confirmation: Mapped[bool] = mapped_column(Boolean, nullable=False)

    def __repr__(self) -> str:
        return f"<Preferences currency={self.currency} theme={self.theme}>"
