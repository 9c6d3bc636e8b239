"""Payee model — address book entries keyed by nickname."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class PayeeBase(DeclarativeBase):
    """Declarative base of the payees store."""


class Payee(PayeeBase):
    """A saved recipient. The nickname is unique and is the primary key."""

    __tablename__ = "payees"

    nickname: Mapped[str] = mapped_column(String(255), primary_key=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    payment_id: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Payee nickname={self.nickname}>"
