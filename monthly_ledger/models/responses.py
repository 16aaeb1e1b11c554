"""
Response payloads.

Field aliases carry the wire names (totalVND, sheetName, ...); dump with
`model_dump(by_alias=True)`.
"""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from monthly_ledger.models.ledger import BudgetStatus, CategoryStat, CurrencyTotals
from monthly_ledger.models.transaction import TransactionRecord, as_number


class LedgerResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    
    status: Literal["success", "error"] = "success"
    
    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class MessageResponse(LedgerResponse):
    message: str
    
    @classmethod
    def error(cls, message: str) -> "MessageResponse":
        return cls(status="error", message=message)


class TotalsResponse(LedgerResponse):
    total_vnd: Union[int, float] = Field(default=0, alias="totalVND")
    total_eur: Union[int, float] = Field(default=0, alias="totalEUR")
    total_usd: Union[int, float] = Field(default=0, alias="totalUSD")
    
    @classmethod
    def from_totals(cls, totals: CurrencyTotals, **extra) -> "TotalsResponse":
        return cls(
            total_vnd=as_number(totals.vnd),
            total_eur=as_number(totals.eur),
            total_usd=as_number(totals.usd),
            **extra,
        )


class TransactionsResponse(LedgerResponse):
    transactions: list[TransactionRecord] = Field(default_factory=list)


class StatsResponse(LedgerResponse):
    stats: dict[str, CategoryStat] = Field(default_factory=dict)
    budget: BudgetStatus = Field(default_factory=BudgetStatus)


class AllDataResponse(TotalsResponse):
    """Totals, transactions and stats of one month in a single payload."""
    transactions: list[TransactionRecord] = Field(default_factory=list)
    stats: dict[str, CategoryStat] = Field(default_factory=dict)
    budget: BudgetStatus = Field(default_factory=BudgetStatus)
