"""
Partition and Aggregate Models

Derived figures (totals, category shares, budget remaining) are plain
value objects; they are rebuilt from a PartitionSnapshot on every read.
"""

from decimal import Decimal
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from monthly_ledger.models.transaction import CATEGORY_NAMES


# First sheet row holding a transaction (rows 1-2 are header and totals)
DATA_ROW_OFFSET = 3

# Fixed column order of a data row
TRANSACTION_COLUMNS = ["Timestamp", "VND", "EUR", "USD", "Category", "Note"]

DEFAULT_BUDGET = Decimal(1600)


class PartitionLayout(BaseModel):
    """Initial content written into a newly created month partition."""
    model_config = ConfigDict(frozen=True)
    
    header: list[str] = Field(
        default_factory=lambda: TRANSACTION_COLUMNS + ["", "SUMMARY"]
    )
    totals_label: str = "TOTALS"
    summary_header: list[str] = Field(
        default_factory=lambda: ["Category", "EUR", "%"]
    )
    categories: list[str] = Field(default_factory=lambda: list(CATEGORY_NAMES))
    budget_label: str = "Budget"
    default_budget: Decimal = DEFAULT_BUDGET


class PartitionSnapshot(BaseModel):
    """
    Raw content of one partition as read from the backing store.
    
    `rows[0]` is sheet row DATA_ROW_OFFSET. Cells are whatever the store
    returned (numbers, text, or missing trailing cells).
    """
    name: str
    rows: list[list[Any]] = Field(default_factory=list)
    budget_cell: Any = None


class CurrencyTotals(BaseModel):
    """Independent per-currency sums; no conversion between them."""
    vnd: Decimal = Decimal(0)
    eur: Decimal = Decimal(0)
    usd: Decimal = Decimal(0)


class CategoryStat(BaseModel):
    amount: Union[int, float] = 0
    percent: int = 0


class BudgetStatus(BaseModel):
    amount: Union[int, float] = 0
    percent: int = 0


class PartitionStats(BaseModel):
    """Category breakdown plus budget utilisation for one month."""
    categories: dict[str, CategoryStat] = Field(default_factory=dict)
    budget: BudgetStatus = Field(default_factory=BudgetStatus)
