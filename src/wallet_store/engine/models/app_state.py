"""Plaintext key/value entries readable before a PIN is known."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class AppStateBase(DeclarativeBase):
    """Declarative base of the app state store."""


class AppStateEntry(AppStateBase):
    """One string value under a unique key."""

    __tablename__ = "app_state"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
