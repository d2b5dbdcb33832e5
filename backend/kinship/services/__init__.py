from .report_parser_service import parse_marker_report
from .grid_codec_service import GridCodec, DEFAULT_CODEC
from .table_store import TableStore, GoogleSheetsStore
from .case_repository_service import CaseRepository, get_case_repository
from .comparison_service import MarkerComparisonService, compare_two_samples, has_matching_alleles, \
    get_comparison_service
from .ingest_service import CaseUploader, collect_date_folder, group_samples_by_case
from .report_service import build_report_context, build_report_filename

__all__ = [
    'parse_marker_report',
    'GridCodec',
    'DEFAULT_CODEC',
    'TableStore',
    'GoogleSheetsStore',
    'CaseRepository',
    'get_case_repository',
    'MarkerComparisonService',
    'compare_two_samples',
    'has_matching_alleles',
    'get_comparison_service',
    'CaseUploader',
    'collect_date_folder',
    'group_samples_by_case',
    'build_report_context',
    'build_report_filename',
]
