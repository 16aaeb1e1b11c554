"""
Partition Store

Maps a month key to its partition in the backing store, creating the
partition with the fixed initial layout the first time it is written to.
"""

from decimal import Decimal
from typing import Optional

from monthly_ledger.log import get_logger
from monthly_ledger.ledger.errors import OperationFailed
from monthly_ledger.models.ledger import PartitionLayout
from monthly_ledger.models.transaction import MonthKey
from monthly_ledger.services.storage import (
    DuplicateError,
    LedgerBackend,
    PartitionHandle,
    StorageError,
)


class PartitionStore:
    """
    Month-keyed access to partitions.
    
    Creation is idempotent in effect: asking for the same month twice
    returns the same partition, never a second copy.
    """
    
    def __init__(
        self,
        backend: LedgerBackend,
        layout: Optional[PartitionLayout] = None,
    ):
        self._backend = backend
        self._layout = layout or PartitionLayout()
        self._logger = get_logger(__name__)
    
    def get(self, key: MonthKey) -> Optional[PartitionHandle]:
        """Existing partition for a month, or None."""
        return self.get_by_name(key.label)
    
    def get_by_name(self, name: str) -> Optional[PartitionHandle]:
        """Existing partition by exact label match, or None."""
        try:
            return self._backend.find_partition(name)
        except StorageError as e:
            raise OperationFailed(f"Lookup of {name} failed: {e}")
    
    def get_or_create(self, key: MonthKey) -> PartitionHandle:
        """
        Partition for a month, created with the initial layout if absent.
        
        Raises:
            OperationFailed: If the store rejects the creation
        """
        partition = self.get(key)
        if partition is not None:
            return partition
        
        try:
            partition = self._backend.create_partition(key.label, self._layout)
        except DuplicateError:
            # Created between lookup and insert
            partition = self.get(key)
            if partition is None:
                raise OperationFailed(f"Sheet {key.label} vanished after creation")
            return partition
        except StorageError as e:
            raise OperationFailed(f"Could not create {key.label}: {e}")
        
        self._logger.info(
            "partition_created",
            partition=key.label,
            default_budget=str(self._layout.default_budget),
        )
        return partition
    
    def set_budget(self, key: MonthKey, amount: Decimal) -> PartitionHandle:
        """
        Write a month's budget, creating the month first when needed.
        
        The caller validates that `amount` is positive.
        """
        partition = self.get_or_create(key)
        try:
            partition.write_budget(amount)
        except StorageError as e:
            raise OperationFailed(f"Budget update failed: {e}")
        
        self._logger.info("budget_updated", partition=key.label, amount=str(amount))
        return partition
