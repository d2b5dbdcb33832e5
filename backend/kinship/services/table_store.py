"""
Table Store
===========
Grid-oriented storage backend: a spreadsheet with one worksheet per intake date.

The case repository only talks to the abstract TableStore. GoogleSheetsStore is
the production implementation on top of gspread.
"""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from kinship.exceptions import BackingStoreError

logger = logging.getLogger(__name__)

SCOPES = ['https://www.googleapis.com/auth/spreadsheets']


class TableStore(ABC):
    """Abstract grid store. Row numbers are 1-based, as in the spreadsheet UI."""

    @abstractmethod
    def list_tables(self) -> List[str]:
        """Return the titles of all tables."""
        ...

    @abstractmethod
    def get_rows(self, table: str, range_spec: str) -> List[List[str]]:
        """Return the cell values of a range (A1 notation, e.g. 'A:Z')."""
        ...

    @abstractmethod
    def append_rows(self, table: str, rows: Sequence[Sequence[str]]) -> None:
        """Append rows after the last non-empty row of a table."""
        ...

    @abstractmethod
    def delete_row_range(self, table: str, start_row: int, row_count: int) -> None:
        """Delete row_count rows starting at start_row."""
        ...

    @abstractmethod
    def create_table(self, name: str) -> str:
        """Create a table and return its title."""
        ...

    def title(self) -> str:
        return self.__class__.__name__


class GoogleSheetsStore(TableStore):
    """
    TableStore backed by a Google spreadsheet.

    Values are written with valueInputOption=RAW so allele calls such as '9.3'
    or '14' stay text and are never reinterpreted as numbers.
    """

    def __init__(self, spreadsheet_id: str, service_account_info: Dict[str, Any]):
        if not spreadsheet_id:
            raise BackingStoreError("Spreadsheet id is not configured")

        try:
            credentials = Credentials.from_service_account_info(service_account_info, scopes=SCOPES)
            self._client = gspread.authorize(credentials)
            self._spreadsheet = self._client.open_by_key(spreadsheet_id)
        except (gspread.exceptions.GSpreadException, GoogleAuthError, ValueError) as e:
            logger.error(f"❌ Failed to open spreadsheet {spreadsheet_id}: {e}")
            raise BackingStoreError(f"Failed to open spreadsheet {spreadsheet_id}") from e

        self.spreadsheet_id = spreadsheet_id
        logger.info(f"✅ Google Sheets store initialized: {self.url}")

    @classmethod
    def from_settings(cls, settings) -> 'GoogleSheetsStore':
        """
        Build from Django settings.

        Credentials come from GOOGLE_SHEETS_CREDENTIALS (JSON string) first,
        then from the GOOGLE_SHEETS_CREDENTIALS_FILE path.
        """
        raw_credentials = getattr(settings, 'GOOGLE_SHEETS_CREDENTIALS', '')
        credentials_file = getattr(settings, 'GOOGLE_SHEETS_CREDENTIALS_FILE', '')

        try:
            if raw_credentials:
                info = json.loads(raw_credentials)
            elif credentials_file:
                with open(credentials_file, encoding='utf-8') as handle:
                    info = json.load(handle)
            else:
                raise BackingStoreError("Google Sheets credentials not found in environment or file")
        except (OSError, json.JSONDecodeError) as e:
            raise BackingStoreError(f"Invalid Google Sheets credentials: {e}") from e

        return cls(settings.KINSHIP_SPREADSHEET_ID, info)

    @property
    def url(self) -> str:
        return f"https://docs.google.com/spreadsheets/d/{self.spreadsheet_id}/edit#gid=0"

    def title(self) -> str:
        return self._spreadsheet.title

    def _worksheet(self, table: str) -> gspread.Worksheet:
        try:
            return self._spreadsheet.worksheet(table)
        except gspread.exceptions.WorksheetNotFound as e:
            raise BackingStoreError(f"Sheet {table} not found") from e

    def list_tables(self) -> List[str]:
        try:
            return [worksheet.title for worksheet in self._spreadsheet.worksheets()]
        except gspread.exceptions.GSpreadException as e:
            logger.error(f"❌ Error getting sheets: {e}")
            raise BackingStoreError("Failed to list sheets") from e

    def get_rows(self, table: str, range_spec: str) -> List[List[str]]:
        try:
            values = self._worksheet(table).get(range_spec)
        except gspread.exceptions.GSpreadException as e:
            logger.error(f"❌ Error getting data from sheet {table}: {e}")
            raise BackingStoreError(f"Failed to read {table}!{range_spec}") from e

        rows = [list(row) for row in (values or [])]
        logger.debug(f"Raw data from sheet {table}: {rows[:5]}")
        return rows

    def append_rows(self, table: str, rows: Sequence[Sequence[str]]) -> None:
        try:
            self._worksheet(table).append_rows(
                [list(row) for row in rows],
                value_input_option='RAW',
                insert_data_option='INSERT_ROWS',
                table_range='A1',
            )
        except gspread.exceptions.GSpreadException as e:
            logger.error(f"❌ Upload error for sheet {table}: {e}")
            raise BackingStoreError(f"Failed to append rows to {table}") from e

        logger.info(f"✅ Appended {len(rows)} rows to {table}")

    def delete_row_range(self, table: str, start_row: int, row_count: int) -> None:
        if row_count <= 0:
            return

        try:
            self._worksheet(table).delete_rows(start_row, start_row + row_count - 1)
        except gspread.exceptions.GSpreadException as e:
            logger.error(f"❌ Error deleting rows {start_row}+{row_count} in {table}: {e}")
            raise BackingStoreError(f"Failed to delete rows in {table}") from e

        logger.info(f"🗑️ Deleted rows {start_row}-{start_row + row_count - 1} in {table}")

    def create_table(self, name: str, rows: int = 1000, cols: int = 26) -> str:
        try:
            worksheet = self._spreadsheet.add_worksheet(title=name, rows=rows, cols=cols)
        except gspread.exceptions.GSpreadException as e:
            logger.error(f"❌ Error creating sheet {name}: {e}")
            raise BackingStoreError(f"Failed to create sheet {name}") from e

        logger.info(f"✅ Created new sheet: {name}")
        return worksheet.title


def find_table(tables: Sequence[str], name: str) -> Optional[str]:
    """Case-insensitive title lookup"""
    wanted = name.lower()
    for table in tables:
        if table.lower() == wanted:
            return table
    return None
