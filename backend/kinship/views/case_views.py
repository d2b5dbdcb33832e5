import logging

from ninja import Router

from kinship.schemas import CaseListResponse, ErrorResponse
from kinship.services.case_repository_service import get_case_repository
from kinship.utils.response_helpers import connected_response, error_response_for

logger = logging.getLogger(__name__)
case_router = Router()


@case_router.post('initialize/', response={200: dict, 502: ErrorResponse, 500: ErrorResponse})
def initialize(request):
    """Check the connection to the spreadsheet"""
    try:
        repository = get_case_repository()
        repository.check_connection()
        return connected_response(repository.store.title())

    except Exception as e:
        return error_response_for(e)


@case_router.get('cases/', response={200: CaseListResponse, 502: ErrorResponse, 500: ErrorResponse})
def list_cases(request, date_folder: str = None):
    """All cases, or only the cases of one date sheet"""
    try:
        repository = get_case_repository()

        if date_folder:
            table = repository.find_table(date_folder)
            cases = repository.get_table_cases(table) if table else []
        else:
            cases = repository.get_all_cases()

        for case in cases:
            if case.is_anomalous:
                logger.warning(f"⚠️ Case {case.base_code} has only {len(case.samples)} sample(s)")

        logger.info(f"📋 Returning {len(cases)} cases")
        return 200, CaseListResponse(data=cases, total=len(cases))

    except Exception as e:
        return error_response_for(e)
