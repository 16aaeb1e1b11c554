"""
Transaction Data Models

A transaction has no identity of its own: it is addressed by the month
partition it lives in and its current row number there. The models below
describe what a caller submits (TransactionFields), what a stored row reads
back as (TransactionRecord), and the month key that names a partition.

Amounts are held as Decimal. Numeric inputs are coerced leniently
("parse a leading number, otherwise 0") because they arrive as raw
query-string text from the transport.
"""

import math
import re
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# =============================================================================
# ENUMS
# =============================================================================

class Category(str, Enum):
    """
    The fixed spending categories of the summary block.
    
    Declaration order is the order of the summary rows.
    Rows may carry any other text as category; such rows are stored
    as-is and simply fall outside every bucket.
    """
    FOOD = "Food"
    TRAVEL = "Travel"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    FUN = "Fun"
    HEALTH = "Health"
    GROCERIES = "Groceries"
    SAVING = "Saving"
    OTHER = "Other"


CATEGORY_NAMES: list[str] = [category.value for category in Category]


def to_decimal(number: float) -> Decimal:
    """Decimal of a double; NaN and infinities are 0."""
    if not math.isfinite(number):
        return Decimal(0)
    return Decimal(repr(number))


def parse_amount(value: Any) -> Decimal:
    """
    Coerce an amount the way a lenient float parser would.
    
    Numbers pass through; text contributes its leading numeric prefix
    ("12.5 EUR" -> 12.5); anything else, including empty text, is 0.
    Values are limited to double range, so "1e5000" overflows to 0.
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, (int, float, Decimal)):
        try:
            return to_decimal(float(value))
        except OverflowError:
            return Decimal(0)
    
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return Decimal(0)
    return to_decimal(float(match.group(0)))


# Largest magnitude rendered as an int; beyond it doubles print in exponent form
_MAX_INT_RENDER = Decimal("1e21")


def as_number(value: Decimal) -> Union[int, float]:
    """Render a Decimal as a JSON-friendly int (when integral) or float."""
    if not value.is_finite():
        return 0
    if abs(value) < _MAX_INT_RENDER and value == value.to_integral_value():
        return int(value)
    return float(value)


# =============================================================================
# MONTH KEY
# =============================================================================

class MonthKey(BaseModel):
    """
    Identifies one monthly partition.
    
    The canonical label ("March 2026") is also the partition's name in
    the backing store.
    """
    model_config = ConfigDict(frozen=True)
    
    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)
    
    @property
    def label(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"
    
    @classmethod
    def from_datetime(cls, value: Union[date, datetime]) -> "MonthKey":
        return cls(year=value.year, month=value.month)
    
    @classmethod
    def from_label(cls, label: str) -> "MonthKey":
        """Parse a "MonthName YYYY" label; raises ValueError when malformed."""
        parts = label.strip().split()
        if len(parts) != 2 or parts[0] not in MONTH_NAMES or not parts[1].isdigit():
            raise ValueError(f"Not a month label: {label!r}")
        return cls(year=int(parts[1]), month=MONTH_NAMES.index(parts[0]) + 1)
    
    @classmethod
    def current(cls) -> "MonthKey":
        return cls.from_datetime(date.today())
    
    def __str__(self) -> str:
        return self.label


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionFields(BaseModel):
    """
    The six stored fields of a transaction, as submitted by a caller.
    
    The timestamp is kept as the caller's text; it is parsed only to
    decide which month partition the row belongs to.
    """
    model_config = ConfigDict(str_strip_whitespace=True)
    
    timestamp: str = Field(
        ...,
        min_length=1,
        description="Transaction date-time (DD/MM/YYYY HH:MM:SS or any parseable form)"
    )
    vnd: Decimal = Field(default=Decimal(0), description="Amount in VND")
    eur: Decimal = Field(default=Decimal(0), description="Amount in EUR")
    usd: Decimal = Field(default=Decimal(0), description="Amount in USD")
    category: str = Field(default="", description="One of Category, or free text")
    note: str = Field(default="", description="Free text note")
    
    @field_validator('vnd', 'eur', 'usd', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return parse_amount(v)
    
    @field_validator('category', 'note', mode='before')
    @classmethod
    def default_empty_text(cls, v: Any) -> str:
        return "" if v is None else str(v)
    
    @property
    def is_known_category(self) -> bool:
        return self.category in CATEGORY_NAMES
    
    def to_row(self) -> list:
        """Storage row in the fixed column order [timestamp, VND, EUR, USD, category, note]."""
        return [
            self.timestamp,
            as_number(self.vnd),
            as_number(self.eur),
            as_number(self.usd),
            self.category,
            self.note,
        ]


class TransactionRecord(BaseModel):
    """
    A stored transaction as returned to callers.
    
    `row` is the current sheet row; it shifts when an earlier row is
    deleted, so callers must not keep it across deletions.
    """
    model_config = ConfigDict(populate_by_name=True)
    
    row: int = Field(..., ge=1)
    sheet_name: str = Field(..., alias="sheetName")
    timestamp: str
    vnd: Union[int, float] = 0
    eur: Union[int, float] = 0
    usd: Union[int, float] = 0
    category: str = ""
    note: str = ""
