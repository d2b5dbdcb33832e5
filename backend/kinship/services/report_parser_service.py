"""
Marker Report Parser
====================
Turns one exported marker report (tab-separated text) into a SampleRecord.

Report layout (first line is a header and is ignored):
    <ignored>\t<code> <name...>\t<marker>\t<allele 1>\t<allele 2>

Single-allele lines mean the sample is homozygous at that marker, so the value
is duplicated. Lines with two alleles always win over single-allele lines for
the same marker, whatever their order in the file.
"""
import logging
from typing import Dict, List, Optional

from kinship.schemas import AllelePair, SampleRecord

logger = logging.getLogger(__name__)

SAMPLE_COLUMN = 1
MARKER_COLUMN = 2
ALLELE_1_COLUMN = 3
ALLELE_2_COLUMN = 4


def _cell(parts: List[str], index: int) -> str:
    return parts[index].strip() if index < len(parts) else ''


def _split_sample_label(label: str) -> tuple:
    """'V2445A Nguyen Van A' → ('V2445A', 'Nguyen Van A')"""
    code, _, name = label.partition(' ')
    return code, name


def parse_marker_report(content: Optional[str]) -> SampleRecord:
    """
    Parse raw report text into a SampleRecord.

    Never raises: blank or missing input gives an empty record, and lines that
    cannot be read contribute nothing.

    Args:
        content: Raw text of the report file

    Returns:
        SampleRecord with code, name and markers {marker: (allele_1, allele_2)}
    """
    if not content:
        logger.warning("⚠️ Empty marker report")
        return SampleRecord()

    # Lines are split untrimmed: the first column may be empty
    lines = [line for line in content.splitlines() if line.strip()]
    rows = [line.split('\t') for line in lines[1:]]

    code = ''
    name = ''
    markers: Dict[str, AllelePair] = {}

    # First pass: two-allele calls
    for parts in rows:
        if not code:
            code, name = _split_sample_label(_cell(parts, SAMPLE_COLUMN))

        marker = _cell(parts, MARKER_COLUMN)
        value1 = _cell(parts, ALLELE_1_COLUMN)
        value2 = _cell(parts, ALLELE_2_COLUMN)

        if marker and value1 and value2 and marker not in markers:
            markers[marker] = (value1, value2)

    # Second pass: single-allele calls for markers still missing
    for parts in rows:
        marker = _cell(parts, MARKER_COLUMN)
        value1 = _cell(parts, ALLELE_1_COLUMN)
        value2 = _cell(parts, ALLELE_2_COLUMN)

        if marker and value1 and not value2 and marker not in markers:
            markers[marker] = (value1, value1)

    logger.info(f"✅ Parsed report {code or '<no code>'}: {len(markers)} markers")
    logger.debug(f"Markers for {code}: {markers}")

    return SampleRecord(code=code, name=name, markers=markers)
