"""Partitioned ledger core."""

from monthly_ledger.ledger.aggregates import AggregateEngine, parse_pct
from monthly_ledger.ledger.batch import BatchQueryService
from monthly_ledger.ledger.errors import (
    InvalidParameters,
    InvalidRowIndex,
    InvalidTimestamp,
    LedgerError,
    OperationFailed,
    PartitionNotFound,
)
from monthly_ledger.ledger.partitions import PartitionStore
from monthly_ledger.ledger.repository import TransactionRepository, WriteResult
from monthly_ledger.ledger.timestamps import TimestampNormalizer

__all__ = [
    "AggregateEngine",
    "BatchQueryService",
    "InvalidParameters",
    "InvalidRowIndex",
    "InvalidTimestamp",
    "LedgerError",
    "OperationFailed",
    "PartitionNotFound",
    "PartitionStore",
    "TimestampNormalizer",
    "TransactionRepository",
    "WriteResult",
    "parse_pct",
]
