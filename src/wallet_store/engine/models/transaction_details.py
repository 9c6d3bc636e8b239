"""Transaction details model — user notes attached to a transaction hash."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class TransactionDetailsBase(DeclarativeBase):
    """Declarative base of the transaction details store."""


class TransactionDetails(TransactionDetailsBase):
    """Memo, address and payee the user recorded for one transaction."""

    __tablename__ = "transaction_details"

    hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    memo: Mapped[str] = mapped_column(Text, nullable=False, default="")
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    payee: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<TransactionDetails hash={self.hash[:16]}>"
