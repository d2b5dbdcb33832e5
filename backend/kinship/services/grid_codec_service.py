"""
Grid Codec
==========
Converts cases to spreadsheet rows and back.

Block layout for one case (3 columns per sample, samples left to right):

    V2445A Name |          |          | V2445B Name |          |
    Marker      | Allele 1 | Allele 2 | Marker      | Allele 1 | Allele 2
    D3S1358     | 14       | 15       | D3S1358     | 15       | 16
    ...         (one row per catalog marker)
    <blank>
    <blank>

Decoding does not assume this layout: sample columns are discovered from the
header row of every block, so blocks written with the legacy spacer column, or
with different sample counts, coexist in one table.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from kinship.constants import (
    ALLELE_LABELS,
    BASE_CODE_LENGTH,
    BLANK_ROWS_AFTER_CASE,
    CASE_CODE_PATTERN,
    COLUMNS_PER_SAMPLE,
    DEFAULT_CATALOG,
    MARKER_LABEL,
    MarkerCatalog,
)
from kinship.schemas import AllelePair, CaseRecord, EMPTY_PAIR, SampleRecord

logger = logging.getLogger(__name__)

Row = List[str]


def _cell(row: Sequence[Any], index: int) -> str:
    if index >= len(row) or row[index] is None:
        return ''
    return str(row[index])


def is_blank_row(row: Optional[Sequence[Any]]) -> bool:
    """Google Sheets trims trailing empty cells, so a blank row comes back as []"""
    if not row:
        return True
    return all(_cell(row, index) == '' for index in range(len(row)))


@dataclass(frozen=True)
class GridCodec:
    """
    Bidirectional case ⇄ grid transform.

    Args:
        catalog: Marker set defining row order
        case_code_pattern: Pattern a block's first cell must match
        spacer_columns: Write one blank cell between samples (legacy layout)
    """

    catalog: MarkerCatalog = DEFAULT_CATALOG
    case_code_pattern: re.Pattern = field(default=CASE_CODE_PATTERN)
    spacer_columns: bool = False

    @property
    def block_height(self) -> int:
        """Rows taken by one encoded case including the blank terminator rows"""
        return 2 + len(self.catalog) + BLANK_ROWS_AFTER_CASE

    def block_width(self, sample_count: int) -> int:
        spacers = max(sample_count - 1, 0) if self.spacer_columns else 0
        return sample_count * COLUMNS_PER_SAMPLE + spacers

    def is_case_start(self, row: Sequence[Any]) -> bool:
        return bool(row) and bool(self.case_code_pattern.match(_cell(row, 0)))

    # ============================================================
    # ENCODE
    # ============================================================

    def _join(self, groups: List[Row]) -> Row:
        row: Row = []
        for index, group in enumerate(groups):
            if index and self.spacer_columns:
                row.append('')
            row.extend(group)
        return row

    def encode(self, samples: Sequence[SampleRecord]) -> List[Row]:
        """
        Encode one case into grid rows.

        Args:
            samples: Samples of the case, in column order

        Returns:
            Rows: name row, label row, one row per marker, two blank rows
        """
        rows: List[Row] = [
            self._join([[sample.header, '', ''] for sample in samples]),
            self._join([[MARKER_LABEL, *ALLELE_LABELS] for _ in samples]),
        ]

        for marker in self.catalog.order():
            groups = []
            for sample in samples:
                allele_1, allele_2 = sample.markers.get(marker, EMPTY_PAIR)
                groups.append([marker, str(allele_1 or ''), str(allele_2 or '')])
            rows.append(self._join(groups))

        width = self.block_width(len(samples))
        rows.extend([''] * width for _ in range(BLANK_ROWS_AFTER_CASE))

        return rows

    # ============================================================
    # DECODE
    # ============================================================

    def decode(self, rows: Optional[Sequence[Sequence[Any]]]) -> List[CaseRecord]:
        """
        Decode every case block found in a table.

        A block starts at a row whose first cell matches the case code pattern
        and ends at the next blank row, the next case start or the end of input.

        Args:
            rows: Raw table values (rows of cells, ragged rows allowed)

        Returns:
            Cases in table order. Blocks without any marker data are dropped.
        """
        rows = rows or []
        cases: List[CaseRecord] = []
        start: Optional[int] = None

        def close(end: int) -> None:
            case = self.decode_block(rows, start, end)
            if case is not None:
                cases.append(case)

        for index, row in enumerate(rows):
            if is_blank_row(row):
                if start is not None:
                    close(index - 1)
                    start = None
                continue

            if self.is_case_start(row):
                if start is not None:
                    close(index - 1)
                start = index
                logger.debug(f"Found case starting at row {index}: {_cell(row, 0)}")

        if start is not None:
            close(len(rows) - 1)

        logger.info(f"✅ Decoded {len(cases)} case(s) from {len(rows)} rows")
        return cases

    def decode_block(
            self,
            rows: Sequence[Sequence[Any]],
            start_row: int,
            end_row: int
    ) -> Optional[CaseRecord]:
        """
        Decode one case block.

        Args:
            rows: Full table contents
            start_row: Index of the header row holding sample codes and names
            end_row: Index of the last row of the block (inclusive)

        Returns:
            CaseRecord, or None when no sample carries any marker
        """
        header = rows[start_row]
        base_code = _cell(header, 0)[:BASE_CODE_LENGTH]

        # Discovered per block: sample code → column holding its header cell
        anchors: Dict[str, int] = {}
        names: Dict[str, str] = {}
        for column in range(len(header)):
            value = _cell(header, column)
            if not value.startswith(base_code):
                continue
            code, _, name = value.partition(' ')
            if code in anchors:
                continue
            anchors[code] = column
            names[code] = name

        markers: Dict[str, Dict[str, AllelePair]] = {code: {} for code in anchors}

        for index in range(start_row + 2, min(end_row, len(rows) - 1) + 1):
            row = rows[index]
            marker = _cell(row, 0) if row else ''
            if not marker or marker == MARKER_LABEL:
                continue

            for code, column in anchors.items():
                allele_1 = _cell(row, column + 1)
                allele_2 = _cell(row, column + 2)
                if allele_1 or allele_2:
                    markers[code][marker] = (allele_1, allele_2)

        samples = [
            SampleRecord(code=code, name=names[code], markers=markers[code])
            for code in anchors
        ]

        if not any(sample.markers for sample in samples):
            logger.warning(f"⚠️ Skipping case {base_code}: no marker data")
            return None

        for sample in samples:
            if not sample.markers:
                logger.warning(f"⚠️ No markers found for sample {sample.code}")

        case = CaseRecord(base_code=base_code, samples=samples)
        if case.is_anomalous:
            logger.warning(
                f"⚠️ Only one sample found for case {base_code}. "
                f"Expected a reference sample and at least one comparison sample"
            )

        return case


DEFAULT_CODEC = GridCodec()
