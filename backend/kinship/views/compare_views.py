import logging
from typing import List

from ninja import Router

from kinship.exceptions import InvalidInputError
from kinship.schemas import CompareRequest, ComparisonResult, ErrorResponse, ReportResponse
from kinship.services.comparison_service import get_comparison_service
from kinship.services.report_service import build_report_context, build_report_filename
from kinship.utils.response_helpers import error_response_for

logger = logging.getLogger(__name__)
compare_router = Router()

ERRORS = {400: ErrorResponse, 404: ErrorResponse, 500: ErrorResponse, 502: ErrorResponse}


def _required(value, field: str) -> str:
    if not value:
        raise InvalidInputError(f"Missing parameter: {field}")
    return value


@compare_router.post('compare/', response={200: List[ComparisonResult], **ERRORS})
def compare(request, data: CompareRequest):
    """
    Run one comparison strategy.

    Types:
        - 'family':  params.code = base code (V2445)
        - 'sameDay': params.code = sample code, compared outside its own case
        - 'all':     params.code = sample code, compared with every other sample
        - 'two':     params.code1 / params.code2 = sample codes
    """
    logger.info(f"🔍 Comparison request: {data.type} {data.params.model_dump(exclude_none=True)}")

    try:
        service = get_comparison_service()
        params = data.params

        if data.type == 'family':
            results = service.compare_family(_required(params.code, 'code'))
        elif data.type == 'sameDay':
            results = service.compare_same_day(_required(params.code, 'code'))
        elif data.type == 'all':
            results = service.compare_all_database(_required(params.code, 'code'))
        elif data.type == 'two':
            results = service.compare_samples(_required(params.code1, 'code1'), _required(params.code2, 'code2'))
        else:
            raise InvalidInputError(f"Unknown comparison type: {data.type}")

        logger.info(f"✅ {len(results)} comparison result(s)")
        return 200, results

    except Exception as e:
        return error_response_for(e)


@compare_router.post('report/', response={200: ReportResponse, **ERRORS})
def report(request, result: ComparisonResult):
    """Template data and file name for the certificate of one comparison"""
    try:
        return 200, ReportResponse(
            filename=build_report_filename(result),
            context=build_report_context(result),
        )

    except Exception as e:
        return error_response_for(e)
