"""
Timestamp normalisation.

Two textual forms are accepted. A fixed-width day-first form
`DD/MM/YYYY HH:MM:SS` is tried first; anything else goes to dateutil's
generic parser. The resulting datetime decides the owning month.
"""

import re
from datetime import datetime
from typing import Any

from dateutil import parser as date_parser

from monthly_ledger.ledger.errors import InvalidTimestamp
from monthly_ledger.models.transaction import MonthKey


DAY_FIRST_PATTERN = re.compile(
    r"(\d{2})/(\d{2})/(\d{4})\s+(\d{2}):(\d{2}):(\d{2})"
)


class TimestampNormalizer:
    """Parses transaction timestamps and derives their month key."""
    
    def parse(self, value: str) -> datetime:
        """
        Parse timestamp text into a datetime.
        
        Raises:
            InvalidTimestamp: neither form yields a valid date. A day-first
                match naming an impossible date (31/02) is not retried
                with the generic parser.
        """
        if not isinstance(value, str) or not value.strip():
            raise InvalidTimestamp(str(value))
        
        parts = DAY_FIRST_PATTERN.search(value)
        if parts:
            day, month, year, hour, minute, second = (int(p) for p in parts.groups())
            try:
                return datetime(year, month, day, hour, minute, second)
            except ValueError:
                raise InvalidTimestamp(value)
        
        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError):
            raise InvalidTimestamp(value)
    
    def month_key(self, value: str) -> MonthKey:
        """Month partition owning the given timestamp text."""
        return MonthKey.from_datetime(self.parse(value))
    
    def to_iso(self, value: Any) -> str:
        """
        Canonical ISO-8601 text for a stored timestamp cell.
        
        Cells that cannot be parsed are returned verbatim so that one bad
        cell never breaks a read.
        """
        if isinstance(value, datetime):
            return value.isoformat()
        text = str(value)
        try:
            return self.parse(text).isoformat()
        except InvalidTimestamp:
            return text
