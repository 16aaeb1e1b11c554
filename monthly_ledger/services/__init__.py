"""Services package."""

from monthly_ledger.services.storage import (
    DuplicateError,
    GoogleSheetsClient,
    GoogleSheetsLedgerBackend,
    InMemoryLedgerBackend,
    LedgerBackend,
    PartitionHandle,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    "DuplicateError",
    "GoogleSheetsClient",
    "GoogleSheetsLedgerBackend",
    "InMemoryLedgerBackend",
    "LedgerBackend",
    "PartitionHandle",
    "StorageConnectionError",
    "StorageError",
]
