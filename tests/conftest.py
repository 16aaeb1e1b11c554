"""
Shared fixtures.

All core tests run against the in-memory backend; no network access.
"""

import pytest

from monthly_ledger.ledger import (
    AggregateEngine,
    BatchQueryService,
    PartitionStore,
    TransactionRepository,
)
from monthly_ledger.models import MonthKey, TransactionFields
from monthly_ledger.router import create_app_components
from monthly_ledger.services.storage import InMemoryLedgerBackend


MARCH = MonthKey(year=2026, month=3)
APRIL = MonthKey(year=2026, month=4)


def entry(timestamp: str = "15/03/2026 10:00:00", **fields) -> TransactionFields:
    """Transaction fields with sensible defaults."""
    return TransactionFields(timestamp=timestamp, **fields)


@pytest.fixture
def backend() -> InMemoryLedgerBackend:
    return InMemoryLedgerBackend()


@pytest.fixture
def partitions(backend) -> PartitionStore:
    return PartitionStore(backend)


@pytest.fixture
def repository(partitions) -> TransactionRepository:
    return TransactionRepository(partitions)


@pytest.fixture
def queries(partitions, repository) -> BatchQueryService:
    return BatchQueryService(partitions, repository, AggregateEngine())


@pytest.fixture
def router(backend):
    return create_app_components(backend)
