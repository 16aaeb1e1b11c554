"""
Abstract Storage Interface

The durable store that holds the monthly partitions is an external
dependency. The ledger core only needs a handful of row-level operations
on it, expressed here as two interfaces:

1. LedgerBackend - finds and creates partitions by name
2. PartitionHandle - reads and writes the rows of one partition

Row numbers are 1-based sheet rows. Data rows start at row 3 and occupy
the fixed columns [timestamp, VND, EUR, USD, category, note].

The Google Sheets implementation is used in production; the in-memory
implementation backs the test suite and local runs.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Optional

from monthly_ledger.models.ledger import PartitionLayout, PartitionSnapshot


class PartitionHandle(ABC):
    """
    One month partition inside the backing store.
    
    Handles are cheap references; every read goes to the store.
    """
    
    @property
    @abstractmethod
    def name(self) -> str:
        """The partition's label, e.g. "March 2026"."""
        pass
    
    @abstractmethod
    def read_snapshot(self) -> PartitionSnapshot:
        """
        Read all data rows and the budget cell in one round trip.
        
        Returns:
            Snapshot whose first row is sheet row 3
            
        Raises:
            StorageError: If the read fails
        """
        pass
    
    @abstractmethod
    def read_rows(self) -> list[list[Any]]:
        """Read the data rows only (first element is sheet row 3)."""
        pass
    
    @abstractmethod
    def append_row(self, values: list[Any]) -> int:
        """
        Write a new data row directly after the last one.
        
        Args:
            values: The six column values
            
        Returns:
            Sheet row number the values were written to
            
        Raises:
            StorageError: If the write fails
        """
        pass
    
    @abstractmethod
    def write_row(self, row: int, values: list[Any]) -> None:
        """
        Overwrite the six columns of an existing data row.
        
        Raises:
            StorageError: If the write fails
        """
        pass
    
    @abstractmethod
    def delete_row(self, row: int) -> None:
        """
        Remove a data row; every later data row moves up by one.
        
        Raises:
            StorageError: If the delete fails
        """
        pass
    
    @abstractmethod
    def write_budget(self, amount: Decimal) -> None:
        """
        Overwrite the budget cell.
        
        Raises:
            StorageError: If the write fails
        """
        pass


class LedgerBackend(ABC):
    """
    Abstract interface for the partition container.
    
    Any storage implementation (Google Sheets, a database, memory)
    must implement these methods.
    """
    
    @abstractmethod
    def find_partition(self, name: str) -> Optional[PartitionHandle]:
        """
        Look up a partition by exact name.
        
        Returns:
            The partition if found, None otherwise
        """
        pass
    
    @abstractmethod
    def create_partition(self, name: str, layout: PartitionLayout) -> PartitionHandle:
        """
        Create a partition and write its initial layout.
        
        Args:
            name: Partition label
            layout: Header labels, category list and default budget
            
        Raises:
            DuplicateError: If a partition with that name exists
            StorageError: If creation fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to create a partition that already exists."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
