"""Column types shared by the store schemas."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import DateTime, LargeBinary
from sqlalchemy.types import TypeDecorator

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect

    from wallet_store.utils.crypto import StoreCipher


class Sealed(TypeDecorator[Any]):
    """JSON value encrypted with the store cipher before it reaches disk.

    Any JSON-compatible Python value (int, bool, str, list) round-trips with
    its type intact. ``None`` is stored as SQL ``NULL`` unencrypted.
    """

    impl = LargeBinary
    # The bound cipher is per-open state, not part of the SQL.
    cache_ok = False

    def __init__(self, cipher: StoreCipher) -> None:
        super().__init__()
        self.cipher = cipher

    def process_bind_param(self, value: Any, dialect: Dialect) -> bytes | None:
        if value is None:
            return None
        payload = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        return self.cipher.seal(payload.encode("utf-8"))

    def process_result_value(self, value: bytes | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        return json.loads(self.cipher.open(value).decode("utf-8"))


class UTCDateTime(TypeDecorator[datetime]):
    """Timezone-aware datetime stored as naive UTC (SQLite keeps no offset)."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=UTC)
