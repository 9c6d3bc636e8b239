"""In-memory arena of wallet graph rows, keyed by table name."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wallet_store.engine.models.wallet import TABLE_ORDER
from wallet_store.errors.store_errors import WalletFormatError

Row = dict[str, Any]


def _empty_tables() -> dict[str, list[Row]]:
    return {name: [] for name in TABLE_ORDER}


@dataclass
class WalletGraph:
    """Rows of every wallet table, in insertion (parent-to-child) order.

    ``encode`` fills a graph with :meth:`add`; a graph read back from the
    store is filled table by table and walked with :meth:`one` and
    :meth:`children`.
    """

    tables: dict[str, list[Row]] = field(default_factory=_empty_tables)

    def add(self, table: str, row: Row, *, row_id: int | None = None) -> int:
        """Append *row* to *table*, allocating the next id unless one is given."""
        rows = self.tables[table]
        if row_id is None:
            row_id = len(rows) + 1
        rows.append({"id": row_id, **row})
        return row_id

    def rows(self, table: str) -> list[Row]:
        return self.tables.get(table, [])

    def one(self, table: str, column: str, value: Any) -> Row:
        """Return the single row of *table* whose *column* equals *value*.

        Raises:
            WalletFormatError: If there is no such row or more than one.
        """
        matches = [row for row in self.rows(table) if row[column] == value]
        if len(matches) != 1:
            msg = f"expected one {table} row with {column}={value!r}, found {len(matches)}"
            raise WalletFormatError(msg)
        return matches[0]

    def children(
        self,
        table: str,
        parent_column: str,
        parent_id: int,
        collection: str | None = None,
    ) -> list[Row]:
        """Rows of *table* owned by *parent_id*, in sequence order."""
        owned = [
            row
            for row in self.rows(table)
            if row[parent_column] == parent_id
            and (collection is None or row["collection"] == collection)
        ]
        return sorted(owned, key=lambda row: row["position"])

    def __len__(self) -> int:
        return sum(len(rows) for rows in self.tables.values())
