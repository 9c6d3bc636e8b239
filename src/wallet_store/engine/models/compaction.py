"""Compaction info model — when the stores were last compacted."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - SQLAlchemy needs this at runtime for Mapped[datetime]

from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from wallet_store.engine.models.base import UTCDateTime

COMPACTION_INFO_PRIMARY_KEY = 0


class CompactionInfoBase(DeclarativeBase):
    """Declarative base of the compaction info store."""


class CompactionInfo(CompactionInfoBase):
    """Single row holding the last compaction timestamp."""

    __tablename__ = "compaction_info"

    primary_key: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False, default=COMPACTION_INFO_PRIMARY_KEY
    )
    last_updated: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
