"""
Case Repository
===============
Persists cases in the table store: one table per intake date, one block of
rows per case (see grid_codec_service for the block layout).

Replacing an existing case is two separate calls, remove_case() then
append_case(). The store has no transactions, so a failure between the two
loses that case; callers own retries around each step.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from django.conf import settings

from kinship.exceptions import InvalidInputError
from kinship.schemas import CaseRecord, SampleRecord
from kinship.constants import BLANK_ROWS_AFTER_CASE
from kinship.services.grid_codec_service import DEFAULT_CODEC, GridCodec, is_blank_row
from kinship.services.table_store import GoogleSheetsStore, TableStore, find_table

logger = logging.getLogger(__name__)

DEFAULT_TABLE_RANGE = 'A:Z'
CODE_COLUMN_RANGE = 'A:A'


class CaseRepository:
    """
    Case-level facade over a TableStore.

    Args:
        store: Backing table store
        codec: Grid codec used for both reading and writing
        ignored_tables: Tables never scanned for cases (e.g. the default 'Sheet1')
        table_range: A1 range read from each table
    """

    def __init__(
            self,
            store: TableStore,
            codec: GridCodec = DEFAULT_CODEC,
            ignored_tables: Sequence[str] = ('Sheet1',),
            table_range: str = DEFAULT_TABLE_RANGE
    ):
        self.store = store
        self.codec = codec
        self.ignored_tables = {name.lower() for name in ignored_tables}
        self.table_range = table_range

    def check_connection(self) -> bool:
        """Touch the store once; raises BackingStoreError when unreachable"""
        tables = self.store.list_tables()
        logger.info(f"✅ Connected to {self.store.title()} ({len(tables)} tables)")
        return True

    # ============================================================
    # TABLES
    # ============================================================

    def find_table(self, date_bucket: str) -> Optional[str]:
        return find_table(self.store.list_tables(), date_bucket)

    def find_or_create_table(self, date_bucket: str) -> str:
        """
        Find the table for a date bucket (case-insensitive) or create it.

        Returns:
            Title of the table as stored
        """
        existing = self.find_table(date_bucket)
        if existing:
            logger.info(f"Found existing sheet: {existing}")
            return existing

        logger.info(f"Creating new sheet: {date_bucket}")
        return self.store.create_table(date_bucket)

    # ============================================================
    # CASE BLOCKS
    # ============================================================

    def _code_column(self, table: str) -> Tuple[Optional[str], List[List[str]]]:
        """(stored table title, column A rows); (None, []) when the table is missing"""
        stored_table = self.find_table(table)
        if stored_table is None:
            logger.debug(f"Sheet {table} does not exist")
            return None, []
        return stored_table, self.store.get_rows(stored_table, CODE_COLUMN_RANGE)

    @staticmethod
    def _find_header_index(rows: Sequence[Sequence[str]], base_code: str) -> Optional[int]:
        for index, row in enumerate(rows):
            if row and str(row[0]).startswith(base_code):
                return index
        return None

    def _block_row_count(self, rows: Sequence[Sequence[str]], start_index: int) -> int:
        """
        Rows taken by the block starting at start_index, terminator rows included.

        Measured from the sheet instead of assumed: appends may drop the blank
        terminator rows, and older blocks may hold a different marker set.
        """
        end = start_index + 1
        while end < len(rows) and not is_blank_row(rows[end]) and not self.codec.is_case_start(rows[end]):
            end += 1

        blanks = 0
        while end < len(rows) and blanks < BLANK_ROWS_AFTER_CASE and is_blank_row(rows[end]):
            end += 1
            blanks += 1

        return end - start_index

    def find_existing_case(self, table: str, base_code: str) -> Optional[int]:
        """
        Locate a case block by its base code.

        Returns:
            1-based row number of the block's header row, or None
        """
        _, rows = self._code_column(table)
        index = self._find_header_index(rows, base_code)
        return None if index is None else index + 1

    def remove_case(self, table: str, base_code: str) -> bool:
        """
        First step of a replace: delete the block of an existing case.

        Returns:
            True when a block was found and deleted
        """
        stored_table, rows = self._code_column(table)
        index = self._find_header_index(rows, base_code)
        if index is None:
            return False

        row_count = self._block_row_count(rows, index)
        logger.info(f"🗑️ Deleting existing case {base_code} at row {index + 1} ({row_count} rows)")
        self.store.delete_row_range(stored_table, index + 1, row_count)
        return True

    def append_case(self, table: str, samples: Sequence[SampleRecord]) -> List[List[str]]:
        """
        Second step of a replace: encode a case and append it to a table.

        Samples are written in role order (A, B, C, ...).

        Returns:
            The rows written
        """
        if not samples:
            raise InvalidInputError("Cannot append a case without samples")

        ordered = sorted(samples, key=lambda sample: sample.role)
        rows = self.codec.encode(ordered)
        self.store.append_rows(table, rows)

        base_code = ordered[0].base_code
        logger.info(f"✅ Successfully uploaded case {base_code} ({len(ordered)} samples)")
        return rows

    # ============================================================
    # READS
    # ============================================================

    def get_table_cases(self, table: str) -> List[CaseRecord]:
        rows = self.store.get_rows(table, self.table_range)
        cases = self.codec.decode(rows)
        logger.info(f"Processed {len(cases)} cases from sheet {table}")
        return cases

    def get_all_cases(self) -> List[CaseRecord]:
        """Cases of every date table, in table order"""
        all_cases: List[CaseRecord] = []

        for table in self.store.list_tables():
            if table.lower() in self.ignored_tables:
                continue
            logger.debug(f"Fetching data from sheet: {table}")
            all_cases.extend(self.get_table_cases(table))

        logger.info(f"📊 Loaded {len(all_cases)} cases from all sheets")
        return all_cases


# Singleton instance
_case_repository_instance: Optional[CaseRepository] = None


def get_case_repository() -> CaseRepository:
    """
    Get singleton CaseRepository wired from Django settings

    Returns:
        CaseRepository: Cached repository over the Google Sheets store
    """
    global _case_repository_instance

    if _case_repository_instance is None:
        codec = GridCodec(spacer_columns=settings.KINSHIP_SPACER_COLUMNS)
        _case_repository_instance = CaseRepository(
            store=GoogleSheetsStore.from_settings(settings),
            codec=codec,
            ignored_tables=settings.KINSHIP_IGNORED_TABLES,
            table_range=settings.KINSHIP_TABLE_RANGE,
        )

    return _case_repository_instance
