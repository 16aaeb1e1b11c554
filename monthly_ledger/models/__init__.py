"""
Data Models Package

Pydantic models for transactions, month partitions, derived aggregates,
inbound commands and response payloads.
"""

from monthly_ledger.models.transaction import (
    CATEGORY_NAMES,
    MONTH_NAMES,
    Category,
    MonthKey,
    TransactionFields,
    TransactionRecord,
    as_number,
    parse_amount,
)
from monthly_ledger.models.ledger import (
    DATA_ROW_OFFSET,
    DEFAULT_BUDGET,
    TRANSACTION_COLUMNS,
    BudgetStatus,
    CategoryStat,
    CurrencyTotals,
    PartitionLayout,
    PartitionSnapshot,
    PartitionStats,
)
from monthly_ledger.models.commands import (
    AddEntryCommand,
    Command,
    CommandError,
    DeleteCommand,
    GetAllDataCommand,
    GetStatsCommand,
    GetTotalsCommand,
    GetTransactionsCommand,
    UpdateBudgetCommand,
    UpdateCommand,
    parse_command,
    parse_entry_body,
)
from monthly_ledger.models.responses import (
    AllDataResponse,
    LedgerResponse,
    MessageResponse,
    StatsResponse,
    TotalsResponse,
    TransactionsResponse,
)

__all__ = [
    # Transaction models
    "CATEGORY_NAMES",
    "MONTH_NAMES",
    "Category",
    "MonthKey",
    "TransactionFields",
    "TransactionRecord",
    "as_number",
    "parse_amount",
    # Partition models
    "DATA_ROW_OFFSET",
    "DEFAULT_BUDGET",
    "TRANSACTION_COLUMNS",
    "BudgetStatus",
    "CategoryStat",
    "CurrencyTotals",
    "PartitionLayout",
    "PartitionSnapshot",
    "PartitionStats",
    # Commands
    "AddEntryCommand",
    "Command",
    "CommandError",
    "DeleteCommand",
    "GetAllDataCommand",
    "GetStatsCommand",
    "GetTotalsCommand",
    "GetTransactionsCommand",
    "UpdateBudgetCommand",
    "UpdateCommand",
    "parse_command",
    "parse_entry_body",
    # Responses
    "AllDataResponse",
    "LedgerResponse",
    "MessageResponse",
    "StatsResponse",
    "TotalsResponse",
    "TransactionsResponse",
]
