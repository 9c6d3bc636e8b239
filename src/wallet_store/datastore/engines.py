"""Database engine factory — one short-lived SQLite engine per store open.

Provides async SQLAlchemy engine creation with:
- SQLite through the aiosqlite driver
- No connection pooling, so a disposed engine leaves no file handle behind
- Configurable echo/debug settings
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

if TYPE_CHECKING:
    from wallet_store.config.settings import DatabaseConfig


def create_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create an async SQLAlchemy engine from database configuration.

    Args:
        config: Database configuration with DSN and debug settings.

    Returns:
        A configured ``AsyncEngine`` ready for use.
    """
    return create_async_engine(
        config.dsn,
        echo=config.debug_sql,
        poolclass=NullPool,
    )
