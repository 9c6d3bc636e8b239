"""StoreError — base exception class for all wallet-store errors."""

from __future__ import annotations


class StoreError(Exception):
    """Base error for all store operations.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code string.
    """

    def __init__(self, message: str, *, code: str = "store-error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class StoreOpenError(StoreError):
    """Store could not be opened: wrong key or corrupted file.

    The two causes are deliberately reported the same way.
    """

    def __init__(self, message: str = "unable to open store") -> None:
        super().__init__(message, code="open-failure")


class StoreNotFoundError(StoreError):
    """Store file does not exist and the caller asked not to create it."""

    def __init__(self, message: str = "store does not exist") -> None:
        super().__init__(message, code="store-not-found")


class SchemaMismatchError(StoreError):
    """Persisted schema differs from the declared one and may not be dropped."""

    def __init__(self, message: str = "persisted schema does not match") -> None:
        super().__init__(message, code="schema-mismatch")


class WriteError(StoreError):
    """A write scope could not commit."""

    def __init__(self, message: str = "transaction could not commit") -> None:
        super().__init__(message, code="write-failure")


class CompactionError(StoreError):
    """A single store's compaction step failed."""

    def __init__(self, message: str = "compaction failed") -> None:
        super().__init__(message, code="compaction-failure")


class WalletFormatError(StoreError):
    """Wallet JSON document or persisted graph does not have the expected shape."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="wallet-format")


class WalletNotFoundError(StoreError):
    """No wallet record is stored."""

    def __init__(self, message: str = "Wallet not present in database") -> None:
        super().__init__(message, code="wallet-not-found")


def as_store_error(exc: BaseException) -> StoreError:
    """Return *exc* if already tagged, otherwise wrap it as an operation failure."""
    if isinstance(exc, StoreError):
        return exc
    error = StoreError(f"{type(exc).__name__}: {exc}", code="operation-failure")
    error.__cause__ = exc
    return error
