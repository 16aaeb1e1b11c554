"""
Batch Query Service

Read side of the ledger. `get_all_data` returns totals, transactions and
stats for a month from a single snapshot read, so a client can render a
whole month with one request. The narrower reads return subsets of the
same figures.

A month without a partition is not an error for reads: every query
answers with its zero/empty payload.
"""

from monthly_ledger.ledger.aggregates import AggregateEngine
from monthly_ledger.ledger.errors import OperationFailed
from monthly_ledger.ledger.partitions import PartitionStore
from monthly_ledger.ledger.repository import TransactionRepository
from monthly_ledger.models.ledger import PartitionSnapshot
from monthly_ledger.models.responses import (
    AllDataResponse,
    StatsResponse,
    TotalsResponse,
    TransactionsResponse,
)
from monthly_ledger.models.transaction import MonthKey
from monthly_ledger.services.storage import PartitionHandle, StorageError


class BatchQueryService:
    """Combines repository reads with recomputed aggregates."""
    
    def __init__(
        self,
        partitions: PartitionStore,
        repository: TransactionRepository,
        engine: AggregateEngine,
    ):
        self._partitions = partitions
        self._repository = repository
        self._engine = engine
    
    def get_all_data(self, key: MonthKey) -> AllDataResponse:
        partition = self._partitions.get(key)
        if partition is None:
            return AllDataResponse()
        
        snapshot = self._snapshot(partition)
        stats = self._engine.stats(snapshot)
        return AllDataResponse.from_totals(
            self._engine.totals(snapshot.rows),
            transactions=self._repository.records(snapshot.name, snapshot.rows),
            stats=stats.categories,
            budget=stats.budget,
        )
    
    def get_transactions(self, key: MonthKey) -> TransactionsResponse:
        partition = self._partitions.get(key)
        if partition is None:
            return TransactionsResponse()
        return TransactionsResponse(
            transactions=self._repository.list_transactions(partition)
        )
    
    def get_stats(self, key: MonthKey) -> StatsResponse:
        partition = self._partitions.get(key)
        if partition is None:
            return StatsResponse()
        
        stats = self._engine.stats(self._snapshot(partition))
        return StatsResponse(stats=stats.categories, budget=stats.budget)
    
    def get_totals(self, key: MonthKey) -> TotalsResponse:
        partition = self._partitions.get(key)
        if partition is None:
            return TotalsResponse()
        try:
            rows = partition.read_rows()
        except StorageError as e:
            raise OperationFailed(f"Read failed: {e}")
        return TotalsResponse.from_totals(self._engine.totals(rows))
    
    def _snapshot(self, partition: PartitionHandle) -> PartitionSnapshot:
        try:
            return partition.read_snapshot()
        except StorageError as e:
            raise OperationFailed(f"Read failed: {e}")
