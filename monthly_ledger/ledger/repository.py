"""
Transaction Repository

Row-level writes against month partitions:

- append: new row after the last data row
- update: overwrite in place when the new timestamp stays in the same
  month, otherwise move the row to the month it now belongs to
- delete: remove a row; later rows shift up by one

A move is two separate store writes (append to the target, then delete
from the source) and is NOT atomic. If the delete fails the transaction
exists in both months. The failure is reported and logged; nothing is
rolled back.
"""

from typing import Any, Optional, Sequence

from pydantic import BaseModel

from monthly_ledger.log import get_logger
from monthly_ledger.ledger.aggregates import (
    COL_CATEGORY,
    COL_EUR,
    COL_NOTE,
    COL_TIMESTAMP,
    COL_USD,
    COL_VND,
    cell,
    to_number,
)
from monthly_ledger.ledger.errors import InvalidRowIndex, OperationFailed
from monthly_ledger.ledger.partitions import PartitionStore
from monthly_ledger.ledger.timestamps import TimestampNormalizer
from monthly_ledger.models.ledger import DATA_ROW_OFFSET
from monthly_ledger.models.transaction import (
    MonthKey,
    TransactionFields,
    TransactionRecord,
    as_number,
)
from monthly_ledger.services.storage import PartitionHandle, StorageError


class WriteResult(BaseModel):
    """Where a write landed, plus the caller-facing message."""
    partition: str
    row: Optional[int] = None
    message: str


class TransactionRepository:
    """
    Appends, updates, moves and deletes transaction rows.
    
    Row identity is (partition, row) and is only stable until a lower
    row of the same partition is deleted.
    """
    
    def __init__(
        self,
        partitions: PartitionStore,
        normalizer: Optional[TimestampNormalizer] = None,
    ):
        self._partitions = partitions
        self._normalizer = normalizer or TimestampNormalizer()
        self._logger = get_logger(__name__)
    
    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    
    def add(self, fields: TransactionFields) -> WriteResult:
        """
        Append a transaction to the month of its timestamp.
        
        The timestamp is parsed before anything is created, so an invalid
        timestamp leaves the store untouched.
        """
        key = self._normalizer.month_key(fields.timestamp)
        partition = self._partitions.get_or_create(key)
        row = self.append(partition, fields)
        return WriteResult(
            partition=partition.name,
            row=row,
            message=f"Added to {partition.name}",
        )
    
    def append(self, partition: PartitionHandle, fields: TransactionFields) -> int:
        """Write `fields` after the last data row; returns the new row number."""
        self._check_category(fields)
        try:
            row = partition.append_row(fields.to_row())
        except StorageError as e:
            self._logger.error("append_failed", partition=partition.name, error=str(e))
            raise OperationFailed(f"Add failed: {e}")
        
        self._logger.info("transaction_appended", partition=partition.name, row=row)
        return row
    
    def delete_at(self, partition: PartitionHandle, row: int) -> WriteResult:
        """
        Remove one data row.
        
        Raises:
            InvalidRowIndex: row is not one of the partition's data rows
            OperationFailed: the store rejected the delete
        """
        self._check_row(partition, row)
        try:
            partition.delete_row(row)
        except StorageError as e:
            self._logger.error(
                "delete_failed", partition=partition.name, row=row, error=str(e)
            )
            raise OperationFailed(f"Delete failed: {e}")
        
        self._logger.info("transaction_deleted", partition=partition.name, row=row)
        return WriteResult(
            partition=partition.name,
            row=row,
            message=f"Deleted row {row} from {partition.name}",
        )
    
    def update_at(
        self,
        partition: PartitionHandle,
        row: int,
        fields: TransactionFields,
    ) -> WriteResult:
        """
        Replace a row's six fields, moving it when its month changes.
        
        Same month: the row is overwritten and keeps its number.
        Other month: the fields are appended to the target month (created
        if needed), then the original row is deleted.
        """
        target_key = self._normalizer.month_key(fields.timestamp)
        self._check_row(partition, row)
        
        if target_key.label == partition.name:
            self._check_category(fields)
            try:
                partition.write_row(row, fields.to_row())
            except StorageError as e:
                self._logger.error(
                    "update_failed", partition=partition.name, row=row, error=str(e)
                )
                raise OperationFailed(f"Update failed: {e}")
            
            self._logger.info("transaction_updated", partition=partition.name, row=row)
            return WriteResult(
                partition=partition.name,
                row=row,
                message=f"Updated row {row}",
            )
        
        return self._move(partition, row, target_key, fields)
    
    def _move(
        self,
        source: PartitionHandle,
        row: int,
        target_key: MonthKey,
        fields: TransactionFields,
    ) -> WriteResult:
        target = self._partitions.get_or_create(target_key)
        new_row = self.append(target, fields)
        
        try:
            source.delete_row(row)
        except StorageError as e:
            self._logger.warning(
                "move_left_duplicate",
                source=source.name,
                source_row=row,
                target=target.name,
                target_row=new_row,
                error=str(e),
            )
            raise OperationFailed(
                f"Moved to {target.name} row {new_row} but could not delete "
                f"row {row} from {source.name}; the transaction is now in both: {e}"
            )
        
        self._logger.info(
            "transaction_moved",
            source=source.name,
            source_row=row,
            target=target.name,
            target_row=new_row,
        )
        return WriteResult(
            partition=target.name,
            row=new_row,
            message=f"Moved from {source.name} to {target.name}",
        )
    
    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    
    def records(self, name: str, rows: Sequence[Sequence[Any]]) -> list[TransactionRecord]:
        """
        Stored rows as records, newest row first.
        
        Rows with an empty timestamp cell are skipped; the remaining
        records keep their real sheet row numbers.
        """
        records = []
        for index in range(len(rows) - 1, -1, -1):
            values = rows[index]
            timestamp = cell(values, COL_TIMESTAMP)
            if timestamp is None or timestamp == "":
                continue
            records.append(TransactionRecord(
                row=index + DATA_ROW_OFFSET,
                sheet_name=name,
                timestamp=self._normalizer.to_iso(timestamp),
                vnd=as_number(to_number(cell(values, COL_VND))),
                eur=as_number(to_number(cell(values, COL_EUR))),
                usd=as_number(to_number(cell(values, COL_USD))),
                category=_text(cell(values, COL_CATEGORY)),
                note=_text(cell(values, COL_NOTE)),
            ))
        return records
    
    def list_transactions(self, partition: PartitionHandle) -> list[TransactionRecord]:
        try:
            rows = partition.read_rows()
        except StorageError as e:
            raise OperationFailed(f"Read failed: {e}")
        return self.records(partition.name, rows)
    
    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------
    
    def _check_row(self, partition: PartitionHandle, row: int) -> None:
        if row < DATA_ROW_OFFSET:
            raise InvalidRowIndex(
                f"Row {row} is not a data row (data starts at row {DATA_ROW_OFFSET})"
            )
        try:
            last_row = DATA_ROW_OFFSET + len(partition.read_rows()) - 1
        except StorageError as e:
            raise OperationFailed(f"Read failed: {e}")
        if row > last_row:
            raise InvalidRowIndex(f"Row {row} is past the last row of {partition.name}")
    
    def _check_category(self, fields: TransactionFields) -> None:
        if fields.category and not fields.is_known_category:
            self._logger.warning("unknown_category", category=fields.category)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)
