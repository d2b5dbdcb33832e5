"""Builders for samples and raw marker report texts."""
from typing import Dict, Iterable, Optional, Tuple

from kinship.constants import MARKER_ORDER
from kinship.schemas import SampleRecord

REPORT_HEADER = 'Sample File\tSample Name\tMarker\tAllele 1\tAllele 2'


def make_markers(
        default: Tuple[str, str] = ('10', '11'),
        overrides: Optional[Dict[str, Tuple[str, str]]] = None
) -> Dict[str, Tuple[str, str]]:
    """Full marker profile with the same call everywhere except overrides."""
    markers = {marker: default for marker in MARKER_ORDER}
    markers.update(overrides or {})
    return markers


def make_sample(code: str, name: str = '', markers: Optional[Dict[str, Tuple[str, str]]] = None) -> SampleRecord:
    return SampleRecord(
        code=code,
        name=name or f"Person {code}",
        markers=make_markers() if markers is None else markers,
    )


def make_report(
        code: str,
        name: str,
        markers: Dict[str, Tuple[str, str]],
        extra_lines: Iterable[str] = ()
) -> str:
    """
    Report text as exported by the analysis software.

    Homozygous calls are written as a single allele, like the exporter does.
    """
    lines = [REPORT_HEADER]
    for marker, (allele_1, allele_2) in markers.items():
        if allele_1 == allele_2:
            lines.append(f"{code}.fsa\t{code} {name}\t{marker}\t{allele_1}")
        else:
            lines.append(f"{code}.fsa\t{code} {name}\t{marker}\t{allele_1}\t{allele_2}")
    lines.extend(extra_lines)
    return '\n'.join(lines) + '\n'
