"""
Report context for the comparison certificate template.

Rendering the .docx happens outside this service; the template expects
{{sample1_name}}, {{Conclusion}}, {{D3S1358_values1_0}}, ... placeholders.
"""
import logging
import re
from typing import Any, Dict

from kinship.constants import DEFAULT_CATALOG, GENDER_MARKER, PLACEHOLDER_PERCENTAGE, MarkerCatalog
from kinship.schemas import ComparisonResult, EMPTY_PAIR

logger = logging.getLogger(__name__)

CONCLUSION_TEXT = {
    True: 'CÓ',
    False: 'KHÔNG',
}

UNSAFE_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')


def build_report_context(
        result: ComparisonResult,
        catalog: MarkerCatalog = DEFAULT_CATALOG
) -> Dict[str, Any]:
    """
    Build template data for one comparison.

    The fixed placeholder percentage is shown only for a blood relation with
    no mismatch other than the gender marker.

    Args:
        result: Comparison to report
        catalog: Marker set, in template order

    Returns:
        Flat dict of template placeholders
    """
    has_real_mismatch = any(marker != GENDER_MARKER for marker in result.mismatches)
    show_percentage = result.is_blood_relation and not has_real_mismatch

    context: Dict[str, Any] = {
        'sample1_name': result.sample1.name or '',
        'sample1_code': result.sample1.code or '',
        'sample2_name': result.sample2.name or '',
        'sample2_code': result.sample2.code or '',
        'Conclusion': CONCLUSION_TEXT[result.is_blood_relation],
        'showPercentage': show_percentage,
        'percentage': PLACEHOLDER_PERCENTAGE if show_percentage else '',
    }

    for marker in catalog.order():
        values1 = result.sample1.markers.get(marker, EMPTY_PAIR)
        values2 = result.sample2.markers.get(marker, EMPTY_PAIR)
        key = re.sub(r'\s+', '_', marker)

        context[f'{key}_values1_0'] = values1[0] or ''
        context[f'{key}_values1_1'] = values1[1] or ''
        context[f'{key}_values2_0'] = values2[0] or ''
        context[f'{key}_values2_1'] = values2[1] or ''

    return context


def build_report_filename(result: ComparisonResult) -> str:
    """
    '<reference code> <reference name>_<other name>.docx'

    The reference (role A) sample leads when either sample is one.
    """
    first, second = result.sample1, result.sample2
    if not first.is_reference and second.is_reference:
        first, second = second, first

    filename = f"{first.code} {first.name}_{second.name}"
    filename = UNSAFE_FILENAME_CHARS.sub('-', filename)

    logger.debug(f"Report filename: {filename}.docx")
    return f"{filename}.docx"
