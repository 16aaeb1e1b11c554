"""
Request Commands

Inbound requests are a closed set of actions. Raw parameters are parsed
into exactly one command variant (discriminated on `action`) before any
ledger code runs, so the core only ever sees typed values.
"""

import math
from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from monthly_ledger.models.transaction import MonthKey, TransactionFields


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _current_year() -> int:
    return date.today().year


def _current_month() -> int:
    return date.today().month


class MonthScoped(BaseModel):
    """Mixin for commands addressed to a month; defaults to the current one."""
    
    year: int = Field(default_factory=_current_year, ge=1, le=9999)
    month: int = Field(default_factory=_current_month, ge=1, le=12)
    
    @model_validator(mode="before")
    @classmethod
    def blank_means_current(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            name: value for name, value in data.items()
            if not (name in ("year", "month") and _is_blank(value))
        }
    
    @property
    def key(self) -> MonthKey:
        return MonthKey(year=self.year, month=self.month)


class GetAllDataCommand(MonthScoped):
    action: Literal["getAllData"]


class GetTransactionsCommand(MonthScoped):
    action: Literal["getTransactions"]


class GetStatsCommand(MonthScoped):
    action: Literal["getStats"]


class GetTotalsCommand(MonthScoped):
    action: Literal["default"]


class UpdateBudgetCommand(MonthScoped):
    action: Literal["updateBudget"]
    budget: Decimal = Field(..., gt=0)
    
    @field_validator('budget')
    @classmethod
    def within_number_range(cls, v: Decimal) -> Decimal:
        if not math.isfinite(float(v)):
            raise ValueError("budget is out of range")
        return v


class AddEntryCommand(TransactionFields):
    action: Literal["addEntry"]
    
    @property
    def fields(self) -> TransactionFields:
        return TransactionFields.model_validate(self.model_dump(exclude={"action"}))


class UpdateCommand(TransactionFields):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)
    
    action: Literal["update"]
    row: int
    sheet_name: str = Field(..., min_length=1, alias="sheetName")
    
    @property
    def fields(self) -> TransactionFields:
        return TransactionFields.model_validate(
            self.model_dump(exclude={"action", "row", "sheet_name"})
        )


class DeleteCommand(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)
    
    action: Literal["delete"]
    row: int
    sheet_name: str = Field(..., min_length=1, alias="sheetName")


Command = Annotated[
    Union[
        GetAllDataCommand,
        GetTransactionsCommand,
        GetStatsCommand,
        GetTotalsCommand,
        UpdateBudgetCommand,
        AddEntryCommand,
        UpdateCommand,
        DeleteCommand,
    ],
    Field(discriminator="action"),
]

_command_adapter = TypeAdapter(Command)


class CommandError(ValueError):
    """Raw parameters do not form a valid command."""
    
    def __init__(self, action: str, detail: str):
        super().__init__(f"Invalid parameters for {action}: {detail}")
        self.action = action
        self.detail = detail


def _describe(error: ValidationError, skip: int) -> str:
    parts = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue["loc"][skip:]) or "request"
        parts.append(f"{location}: {issue['msg']}")
    return "; ".join(parts)


def parse_command(params: Mapping[str, Any]) -> Command:
    """
    Build a command from request parameters.
    
    A missing or empty `action` selects the default totals read.
    
    Raises:
        CommandError: unknown action or invalid/missing parameters
    """
    data = {key: value for key, value in params.items()}
    action = data.get("action") or "default"
    data["action"] = action
    try:
        return _command_adapter.validate_python(data)
    except ValidationError as e:
        raise _command_error(action, e, skip=1)


def parse_entry_body(body: Mapping[str, Any]) -> AddEntryCommand:
    """The JSON write path: always an append."""
    data = dict(body)
    data["action"] = "addEntry"
    try:
        return AddEntryCommand.model_validate(data)
    except ValidationError as e:
        raise _command_error("addEntry", e, skip=0)


def _command_error(action: str, error: ValidationError, skip: int) -> CommandError:
    if any(issue["type"] == "union_tag_invalid" for issue in error.errors()):
        return CommandError(action, f"unknown action {action!r}")
    return CommandError(action, _describe(error, skip))
