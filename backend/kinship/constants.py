"""
Marker and grid constants used across the application
"""
import re
from dataclasses import dataclass
from typing import Tuple

# Column order of every persisted case block and iteration order of every comparison
MARKER_ORDER = (
    'D3S1358', 'vWA', 'D16S539', 'CSF1PO', 'D6S1043',
    'Yindel', 'AMEL', 'D8S1179', 'D21S11', 'D18S51',
    'D5S818', 'D2S441', 'D19S433', 'FGA', 'D10S1248',
    'D22S1045', 'D1S1656', 'D13S317', 'D7S820', 'Penta E',
    'Penta D', 'TH01', 'D12S391', 'D2S1338', 'TPOX',
)

# Letter + 4 digits + role letter, e.g. V2445A
CASE_CODE_PATTERN = re.compile(r'^[A-Z]\d{4}[A-Z]')

BASE_CODE_LENGTH = 5
REFERENCE_ROLE_SUFFIX = 'A'

# Grid labels
MARKER_LABEL = 'Marker'
ALLELE_LABELS = ('Allele 1', 'Allele 2')
COLUMNS_PER_SAMPLE = 3
BLANK_ROWS_AFTER_CASE = 2

# Conclusion threshold: a single mismatch is tolerated as a mutation
MISMATCH_TOLERANCE = 1

# Report template
PLACEHOLDER_PERCENTAGE = '99.99999999999999'
GENDER_MARKER = 'Yindel'


@dataclass(frozen=True)
class MarkerCatalog:
    """Ordered, immutable marker set shared by the codec and the comparison engine."""

    markers: Tuple[str, ...] = MARKER_ORDER

    def order(self) -> Tuple[str, ...]:
        return self.markers

    def __len__(self) -> int:
        return len(self.markers)

    def __iter__(self):
        return iter(self.markers)


DEFAULT_CATALOG = MarkerCatalog()
