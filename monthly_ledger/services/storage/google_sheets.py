"""
Google Sheets Storage Implementation

Each month partition is one worksheet titled with its label
("March 2026"). Layout of a worksheet:

    A1:J1    header labels
    A2:D2    TOTALS row (SUM formulas over the data rows)
    A3:F...  data rows, one transaction per row
    H2:J2    summary header
    H3:J11   one row per category: SUMIF of EUR and share of total EUR
    H12:J12  budget amount and remaining share

The formulas are there for people reading the spreadsheet. The ledger
core never reads them back; it recomputes every aggregate from A3:F.

TRADEOFFS:
- No transactions: a move is an append followed by a delete
- Deleting a row only removes cells A:F so the summary block stays put
"""

from decimal import Decimal
from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from gspread.utils import DateTimeOption, ValueInputOption, ValueRenderOption
from tenacity import retry, stop_after_attempt, wait_exponential

from monthly_ledger.config import GoogleSheetsSettings, get_settings
from monthly_ledger.models.ledger import (
    DATA_ROW_OFFSET,
    TRANSACTION_COLUMNS,
    PartitionLayout,
    PartitionSnapshot,
)
from monthly_ledger.models.transaction import CATEGORY_NAMES, as_number
from monthly_ledger.services.storage.interface import (
    DuplicateError,
    LedgerBackend,
    PartitionHandle,
    StorageConnectionError,
    StorageError,
)


DATA_RANGE = f"A{DATA_ROW_OFFSET}:F"
SUMMARY_FIRST_ROW = 3
BUDGET_ROW = SUMMARY_FIRST_ROW + len(CATEGORY_NAMES)
BUDGET_CELL = f"I{BUDGET_ROW}"


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.
    
    Handles authentication and provides retry logic for connecting.
    """
    
    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets
    
    @property
    def worksheet_rows(self) -> int:
        return self._settings.worksheet_rows
    
    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.
        
        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")
        
        return self._client
    
    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet


def layout_updates(layout: PartitionLayout) -> list[dict]:
    """Cell writes that lay out a fresh monthly worksheet."""
    first = DATA_ROW_OFFSET
    updates = [
        {"range": "A1:J1", "values": [layout.header + [""] * (10 - len(layout.header))]},
        {
            "range": "A2:D2",
            "values": [[
                layout.totals_label,
                f"=SUM(B{first}:B)",
                f"=SUM(C{first}:C)",
                f"=SUM(D{first}:D)",
            ]],
        },
        {"range": "H2:J2", "values": [layout.summary_header]},
    ]
    
    category_rows = []
    for offset, category in enumerate(layout.categories):
        row = SUMMARY_FIRST_ROW + offset
        category_rows.append([
            category,
            f"=SUMIF($E${first}:$E,H{row},$C${first}:$C)",
            f"=IF($C$2=0,0,I{row}/$C$2)",
        ])
    last_summary = SUMMARY_FIRST_ROW + len(layout.categories) - 1
    updates.append({"range": f"H{SUMMARY_FIRST_ROW}:J{last_summary}", "values": category_rows})
    
    budget_row = last_summary + 1
    updates.append({
        "range": f"H{budget_row}:J{budget_row}",
        "values": [[layout.budget_label, as_number(layout.default_budget), f"=1-C2/I{budget_row}"]],
    })
    return updates


class GoogleSheetsPartition(PartitionHandle):
    """One monthly worksheet."""
    
    def __init__(self, worksheet: gspread.Worksheet, spreadsheet: gspread.Spreadsheet):
        self._worksheet = worksheet
        self._spreadsheet = spreadsheet
    
    @property
    def name(self) -> str:
        return self._worksheet.title
    
    def read_snapshot(self) -> PartitionSnapshot:
        try:
            rows, budget = self._worksheet.batch_get(
                [DATA_RANGE, BUDGET_CELL],
                value_render_option=ValueRenderOption.unformatted,
                date_time_render_option=DateTimeOption.formatted_string,
            )
        except Exception as e:
            raise StorageError(f"Failed to read {self.name}: {e}")
        
        budget_cell = budget[0][0] if budget and budget[0] else None
        return PartitionSnapshot(name=self.name, rows=list(rows), budget_cell=budget_cell)
    
    def read_rows(self) -> list[list[Any]]:
        try:
            return self._worksheet.get(
                DATA_RANGE,
                value_render_option=ValueRenderOption.unformatted,
                date_time_render_option=DateTimeOption.formatted_string,
            )
        except Exception as e:
            raise StorageError(f"Failed to read {self.name}: {e}")
    
    def append_row(self, values: list[Any]) -> int:
        row = DATA_ROW_OFFSET + len(self.read_rows())
        try:
            if row > self._worksheet.row_count:
                self._worksheet.add_rows(row - self._worksheet.row_count)
            self._write(row, values)
        except Exception as e:
            raise StorageError(f"Failed to append to {self.name}: {e}")
        return row
    
    def write_row(self, row: int, values: list[Any]) -> None:
        try:
            self._write(row, values)
        except Exception as e:
            raise StorageError(f"Failed to write row {row} of {self.name}: {e}")
    
    def _write(self, row: int, values: list[Any]) -> None:
        last_column = chr(ord("A") + len(TRANSACTION_COLUMNS) - 1)
        self._worksheet.update(
            values=[values],
            range_name=f"A{row}:{last_column}{row}",
            value_input_option=ValueInputOption.raw,
        )
    
    def delete_row(self, row: int) -> None:
        # deleteRange on A:F only; H:J summary cells keep their coordinates
        request = {
            "deleteRange": {
                "range": {
                    "sheetId": self._worksheet.id,
                    "startRowIndex": row - 1,
                    "endRowIndex": row,
                    "startColumnIndex": 0,
                    "endColumnIndex": len(TRANSACTION_COLUMNS),
                },
                "shiftDimension": "ROWS",
            }
        }
        try:
            self._spreadsheet.batch_update({"requests": [request]})
        except Exception as e:
            raise StorageError(f"Failed to delete row {row} of {self.name}: {e}")
    
    def write_budget(self, amount: Decimal) -> None:
        try:
            self._worksheet.update_acell(BUDGET_CELL, as_number(amount))
        except Exception as e:
            raise StorageError(f"Failed to write budget of {self.name}: {e}")


class GoogleSheetsLedgerBackend(LedgerBackend):
    """
    Google Sheets implementation of the partition container.
    
    Partitions are worksheets in a single spreadsheet.
    """
    
    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()
    
    def find_partition(self, name: str) -> Optional[GoogleSheetsPartition]:
        spreadsheet = self._client.get_spreadsheet()
        try:
            return GoogleSheetsPartition(spreadsheet.worksheet(name), spreadsheet)
        except gspread.WorksheetNotFound:
            return None
        except Exception as e:
            raise StorageError(f"Failed to look up sheet {name}: {e}")
    
    def create_partition(self, name: str, layout: PartitionLayout) -> GoogleSheetsPartition:
        spreadsheet = self._client.get_spreadsheet()
        try:
            worksheet = spreadsheet.add_worksheet(
                title=name,
                rows=self._client.worksheet_rows,
                cols=10,
            )
        except gspread.exceptions.APIError as e:
            if "already exists" in str(e):
                raise DuplicateError(f"Sheet already exists: {name}")
            raise StorageError(f"Failed to create sheet {name}: {e}")
        except Exception as e:
            raise StorageError(f"Failed to create sheet {name}: {e}")
        
        try:
            worksheet.batch_update(
                layout_updates(layout),
                value_input_option=ValueInputOption.user_entered,
            )
        except Exception as e:
            raise StorageError(f"Failed to lay out sheet {name}: {e}")
        return GoogleSheetsPartition(worksheet, spreadsheet)
