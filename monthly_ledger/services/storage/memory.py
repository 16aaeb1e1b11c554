"""
In-memory backing store.

Holds partitions as plain Python lists with the same row semantics as the
spreadsheet: data rows are contiguous from row 3, deleting one shifts the
rest up. Used by the test suite and for local runs without credentials.
"""

from decimal import Decimal
from typing import Any, Optional

from monthly_ledger.models.ledger import (
    DATA_ROW_OFFSET,
    PartitionLayout,
    PartitionSnapshot,
)
from monthly_ledger.services.storage.interface import (
    DuplicateError,
    LedgerBackend,
    PartitionHandle,
    StorageError,
)


class InMemoryPartition(PartitionHandle):
    """A partition held in process memory."""
    
    def __init__(self, name: str, layout: PartitionLayout):
        self._name = name
        self.layout = layout
        self.rows: list[list[Any]] = []
        self.budget: Any = layout.default_budget
    
    @property
    def name(self) -> str:
        return self._name
    
    def _index(self, row: int) -> int:
        index = row - DATA_ROW_OFFSET
        if index < 0 or index >= len(self.rows):
            raise StorageError(f"Row {row} is out of bounds in {self._name}")
        return index
    
    def read_snapshot(self) -> PartitionSnapshot:
        return PartitionSnapshot(
            name=self._name,
            rows=self.read_rows(),
            budget_cell=self.budget,
        )
    
    def read_rows(self) -> list[list[Any]]:
        return [list(row) for row in self.rows]
    
    def append_row(self, values: list[Any]) -> int:
        self.rows.append(list(values))
        return DATA_ROW_OFFSET + len(self.rows) - 1
    
    def write_row(self, row: int, values: list[Any]) -> None:
        self.rows[self._index(row)] = list(values)
    
    def delete_row(self, row: int) -> None:
        del self.rows[self._index(row)]
    
    def write_budget(self, amount: Decimal) -> None:
        self.budget = amount


class InMemoryLedgerBackend(LedgerBackend):
    """Dict of partitions keyed by name."""
    
    def __init__(self):
        self.partitions: dict[str, InMemoryPartition] = {}
    
    def find_partition(self, name: str) -> Optional[InMemoryPartition]:
        return self.partitions.get(name)
    
    def create_partition(self, name: str, layout: PartitionLayout) -> InMemoryPartition:
        if name in self.partitions:
            raise DuplicateError(f"Partition already exists: {name}")
        partition = InMemoryPartition(name, layout)
        self.partitions[name] = partition
        return partition
