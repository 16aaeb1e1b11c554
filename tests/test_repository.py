"""Tests for partition creation and row-level writes."""

import pytest
from decimal import Decimal

from monthly_ledger.ledger import (
    AggregateEngine,
    InvalidParameters,
    InvalidRowIndex,
    InvalidTimestamp,
    OperationFailed,
)
from monthly_ledger.models import CATEGORY_NAMES, MonthKey
from monthly_ledger.services.storage import StorageError

from tests.conftest import APRIL, MARCH, entry


class TestPartitionStore:
    
    def test_created_lazily_with_layout(self, partitions, backend):
        """Test a new month gets the default budget and category list."""
        assert partitions.get(MARCH) is None
        partition = partitions.get_or_create(MARCH)
        assert partition.name == "March 2026"
        assert partition.read_snapshot().budget_cell == Decimal(1600)
        assert backend.partitions["March 2026"].layout.categories == CATEGORY_NAMES
    
    def test_get_or_create_is_idempotent(self, partitions, backend):
        """Test asking twice never creates a second partition."""
        first = partitions.get_or_create(MARCH)
        second = partitions.get_or_create(MARCH)
        assert first is second
        assert list(backend.partitions) == ["March 2026"]
    
    def test_set_budget_creates_month(self, partitions, backend):
        """Test a budget write addressed to a new month creates it."""
        partitions.set_budget(APRIL, Decimal(2000))
        assert backend.partitions["April 2026"].budget == Decimal(2000)
    
    def test_budget_is_per_month(self, partitions):
        partitions.set_budget(MARCH, Decimal(500))
        assert partitions.get_or_create(APRIL).read_snapshot().budget_cell == Decimal(1600)


class TestAppend:
    
    def test_add_goes_to_timestamp_month(self, repository, backend):
        """Test the partition is chosen by the timestamp."""
        result = repository.add(entry("02/04/2026 09:00:00", eur=5))
        assert result.partition == "April 2026"
        assert result.row == 3
        assert result.message == "Added to April 2026"
        assert backend.partitions["April 2026"].rows == [
            ["02/04/2026 09:00:00", 0, 5, 0, "", ""]
        ]
    
    def test_rows_are_contiguous(self, repository):
        """Test successive appends take the next rows."""
        rows = [repository.add(entry(note=str(i))).row for i in range(3)]
        assert rows == [3, 4, 5]
    
    def test_invalid_timestamp_writes_nothing(self, repository, backend):
        """Test a bad timestamp creates no partition and no row."""
        with pytest.raises(InvalidTimestamp):
            repository.add(entry("xyz", eur=5))
        assert backend.partitions == {}
    
    def test_unknown_category_is_stored(self, repository, backend):
        repository.add(entry(category="Snacks"))
        assert backend.partitions["March 2026"].rows[0][4] == "Snacks"
    
    def test_store_failure(self, repository, partitions, monkeypatch):
        """Test a rejected write surfaces as OperationFailed."""
        partition = partitions.get_or_create(MARCH)
        
        def reject(values):
            raise StorageError("quota exceeded")
        
        monkeypatch.setattr(partition, "append_row", reject)
        with pytest.raises(OperationFailed, match="quota exceeded"):
            repository.add(entry())


class TestDelete:
    
    def test_later_rows_shift_down(self, repository, partitions):
        """Test deleting row r moves every row after it up by one."""
        for note in ("a", "b", "c"):
            repository.add(entry(note=note))
        partition = partitions.get(MARCH)
        
        result = repository.delete_at(partition, 3)
        
        assert result.message == "Deleted row 3 from March 2026"
        by_row = {record.row: record.note for record in repository.list_transactions(partition)}
        assert by_row == {3: "b", 4: "c"}
    
    def test_append_then_delete_restores_aggregates(self, repository, partitions):
        """Test an append followed by its delete leaves totals unchanged."""
        repository.add(entry(eur=10, category="Food"))
        partition = partitions.get(MARCH)
        engine = AggregateEngine()
        before = engine.stats(partition.read_snapshot())
        
        row = repository.add(entry(eur=99, vnd=1000, category="Travel")).row
        repository.delete_at(partition, row)
        
        after = engine.stats(partition.read_snapshot())
        assert after == before
        assert engine.totals(partition.read_rows()).eur == Decimal(10)
    
    @pytest.mark.parametrize("row", [0, 1, 2])
    def test_header_rows_rejected(self, repository, partitions, row):
        """Test rows above the data offset cannot be deleted."""
        repository.add(entry())
        with pytest.raises(InvalidRowIndex):
            repository.delete_at(partitions.get(MARCH), row)
    
    def test_row_past_end_rejected(self, repository, partitions):
        repository.add(entry())
        with pytest.raises(InvalidRowIndex):
            repository.delete_at(partitions.get(MARCH), 4)
    
    def test_invalid_row_is_invalid_parameters(self):
        assert issubclass(InvalidRowIndex, InvalidParameters)


class TestUpdate:
    
    def test_same_month_in_place(self, repository, partitions):
        """Test an update within the month keeps the row number."""
        repository.add(entry(note="first"))
        repository.add(entry(note="second", eur=1))
        partition = partitions.get(MARCH)
        
        result = repository.update_at(
            partition, 4, entry("20/03/2026 18:00:00", eur=7, category="Fun", note="edited")
        )
        
        assert result.message == "Updated row 4"
        assert result.row == 4
        assert partition.read_rows()[1] == ["20/03/2026 18:00:00", 0, 7, 0, "Fun", "edited"]
        assert len(partition.read_rows()) == 2
    
    def test_other_month_moves(self, repository, partitions):
        """Test an update into another month relocates the row."""
        repository.add(entry(note="stay"))
        repository.add(entry(note="go", eur=3))
        source = partitions.get(MARCH)
        new_fields = entry("01/04/2026 08:00:00", eur=4, usd=2, category="Bills", note="go")
        
        result = repository.update_at(source, 4, new_fields)
        
        assert result.message == "Moved from March 2026 to April 2026"
        assert [r[5] for r in source.read_rows()] == ["stay"]
        target = partitions.get(APRIL)
        assert target.read_rows() == [new_fields.to_row()]
    
    def test_move_into_existing_month_appends(self, repository, partitions):
        repository.add(entry("05/04/2026 08:00:00", note="april"))
        repository.add(entry(note="march"))
        
        result = repository.update_at(
            partitions.get(MARCH), 3, entry("06/04/2026 08:00:00", note="march")
        )
        
        assert result.row == 4
        assert [r[5] for r in partitions.get(APRIL).read_rows()] == ["april", "march"]
        assert partitions.get(MARCH).read_rows() == []
    
    def test_failed_delete_leaves_duplicate(self, repository, partitions, monkeypatch):
        """Test the non-atomic move: a failed delete keeps both copies."""
        repository.add(entry(note="dup"))
        source = partitions.get(MARCH)
        
        def reject(row):
            raise StorageError("backend offline")
        
        monkeypatch.setattr(source, "delete_row", reject)
        with pytest.raises(OperationFailed, match="now in both"):
            repository.update_at(source, 3, entry("01/04/2026 08:00:00", note="dup"))
        
        assert len(source.read_rows()) == 1
        assert len(partitions.get(APRIL).read_rows()) == 1
    
    def test_invalid_timestamp_changes_nothing(self, repository, partitions, backend):
        repository.add(entry(note="orig"))
        source = partitions.get(MARCH)
        
        with pytest.raises(InvalidTimestamp):
            repository.update_at(source, 3, entry("xyz", note="new"))
        
        assert source.read_rows()[0][5] == "orig"
        assert list(backend.partitions) == ["March 2026"]
    
    def test_row_past_end_rejected(self, repository, partitions):
        repository.add(entry())
        with pytest.raises(InvalidRowIndex):
            repository.update_at(partitions.get(MARCH), 9, entry())
