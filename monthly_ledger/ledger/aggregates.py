"""
Aggregate Engine

Every derived figure of a partition is a pure function of its data rows
(and, for the budget, of the budget cell):

- totals: per-currency sum of the VND/EUR/USD columns
- category breakdown: EUR sum per fixed category and its share of total EUR
- budget remaining: 1 - totalEUR / budget

Shares are computed as fractions of one, the same values the sheet's own
formulas produce, and normalised with `parse_pct`. Nothing here is cached,
so the figures cannot drift from the rows they were computed from.
"""

import math
import re
from decimal import Decimal
from typing import Any, Optional, Sequence

from monthly_ledger.models.ledger import (
    BudgetStatus,
    CategoryStat,
    CurrencyTotals,
    PartitionSnapshot,
    PartitionStats,
)
from monthly_ledger.models.transaction import CATEGORY_NAMES, as_number, to_decimal


# Column positions within a data row
COL_TIMESTAMP, COL_VND, COL_EUR, COL_USD, COL_CATEGORY, COL_NOTE = range(6)

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


def cell(row: Sequence[Any], index: int) -> Any:
    """Cell value, or None when the store trimmed trailing empty cells."""
    return row[index] if index < len(row) else None


def to_number(value: Any) -> Decimal:
    """
    Strict numeric reading of a stored cell.
    
    Numbers and fully numeric text count; empty cells, partial numbers
    ("12abc") and values outside double range are 0.
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return Decimal(0)
    try:
        return to_decimal(float(value))
    except (TypeError, ValueError, OverflowError):
        return Decimal(0)


def js_round(value: Any) -> int:
    """Round half toward +infinity (JavaScript Math.round); non-finite values are 0."""
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return math.floor(number + 0.5)


def parse_pct(value: Any) -> int:
    """
    Normalise a percentage that may arrive in one of three shapes.
    
    - text containing "%": the leading integer ("45%" -> 45)
    - a nonzero number with absolute value under 10: a fraction of one
      (0.07 -> 7)
    - any other number: already a whole percentage (12 -> 12)
    
    Anything else is 0. The rule is heuristic: a fraction of 12.0 meaning
    1200% comes back as 12.
    """
    if isinstance(value, str):
        if "%" in value:
            match = _LEADING_INT.match(value.replace("%", "", 1))
            return js_round(match.group(0)) if match else 0
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if isinstance(value, Decimal) and not value.is_finite():
        return 0
    if value != 0 and abs(value) < 10:
        return js_round(Decimal(str(value)) * 100)
    return js_round(value)


class AggregateEngine:
    """Recomputes the derived figures of one partition."""
    
    def __init__(self, categories: Optional[list[str]] = None):
        self._categories = categories or list(CATEGORY_NAMES)
    
    def totals(self, rows: Sequence[Sequence[Any]]) -> CurrencyTotals:
        totals = CurrencyTotals()
        for row in rows:
            totals.vnd += to_number(cell(row, COL_VND))
            totals.eur += to_number(cell(row, COL_EUR))
            totals.usd += to_number(cell(row, COL_USD))
        return totals
    
    def category_breakdown(
        self,
        rows: Sequence[Sequence[Any]],
        total_eur: Optional[Decimal] = None,
    ) -> dict[str, CategoryStat]:
        """
        EUR amount and share for each fixed category, in category order.
        
        Rows are matched on exact category text; rows with any other
        category contribute to the total but to no bucket.
        """
        if total_eur is None:
            total_eur = self.totals(rows).eur
        
        amounts = {category: Decimal(0) for category in self._categories}
        for row in rows:
            category = cell(row, COL_CATEGORY)
            if isinstance(category, str) and category in amounts:
                amounts[category] += to_number(cell(row, COL_EUR))
        
        breakdown = {}
        for category, amount in amounts.items():
            share = Decimal(0) if total_eur == 0 else amount / total_eur
            breakdown[category] = CategoryStat(
                amount=as_number(amount),
                percent=parse_pct(share),
            )
        return breakdown
    
    def budget_status(self, total_eur: Decimal, budget_cell: Any) -> BudgetStatus:
        """Budget amount and remaining share; 0% when no budget is set."""
        amount = to_number(budget_cell)
        if amount == 0:
            return BudgetStatus(amount=0, percent=0)
        remaining = Decimal(1) - total_eur / amount
        return BudgetStatus(amount=as_number(amount), percent=parse_pct(remaining))
    
    def stats(self, snapshot: PartitionSnapshot) -> PartitionStats:
        total_eur = self.totals(snapshot.rows).eur
        return PartitionStats(
            categories=self.category_breakdown(snapshot.rows, total_eur),
            budget=self.budget_status(total_eur, snapshot.budget_cell),
        )
