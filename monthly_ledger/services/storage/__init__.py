"""
Storage Services Package

Provides the abstract backing-store interface and its implementations.
Google Sheets is the production backend; the in-memory backend mirrors
its row semantics for tests.
"""

from monthly_ledger.services.storage.interface import (
    DuplicateError,
    LedgerBackend,
    PartitionHandle,
    StorageConnectionError,
    StorageError,
)
from monthly_ledger.services.storage.memory import (
    InMemoryLedgerBackend,
    InMemoryPartition,
)
from monthly_ledger.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsLedgerBackend,
    GoogleSheetsPartition,
)

__all__ = [
    # Interfaces
    "LedgerBackend",
    "PartitionHandle",
    # Exceptions
    "DuplicateError",
    "StorageConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryLedgerBackend",
    "InMemoryPartition",
    # Google Sheets implementation
    "GoogleSheetsClient",
    "GoogleSheetsLedgerBackend",
    "GoogleSheetsPartition",
]
