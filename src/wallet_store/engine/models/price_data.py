"""Price cache table — one float column per configured currency.

The column set is only known at runtime, so the table is declared from the
currency list each time the store is opened. Adding or removing a currency
changes the schema fingerprint and the cache is rebuilt empty.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Column, Float, Integer, MetaData, Table

if TYPE_CHECKING:
    from collections.abc import Sequence

PRICE_DATA = "price_data"
PRICE_DATA_PRIMARY_KEY = 1


def build_price_metadata(currencies: Sequence[str]) -> MetaData:
    """Declare the price cache table for *currencies*."""
    if "primary_key" in currencies:
        msg = "'primary_key' cannot be used as a currency code"
        raise ValueError(msg)
    metadata = MetaData()
    Table(
        PRICE_DATA,
        metadata,
        Column("primary_key", Integer, primary_key=True, autoincrement=False),
        *(Column(code, Float, nullable=True) for code in currencies),
    )
    return metadata
