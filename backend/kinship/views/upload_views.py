import logging
from typing import List

from ninja import File, Form, Router, UploadedFile as NinjaUploadedFile

from kinship.schemas import CheckCaseResponse, ErrorResponse, UploadResponse
from kinship.services.case_repository_service import get_case_repository
from kinship.services.ingest_service import CaseUploader
from kinship.services.report_parser_service import parse_marker_report
from kinship.tasks import upload_reports_task
from kinship.utils.file_helpers import read_uploaded_text, validate_report_file
from kinship.utils.response_helpers import error_response_for

logger = logging.getLogger(__name__)
upload_router = Router()


@upload_router.post('upload/', response={200: UploadResponse, 202: dict, 400: UploadResponse, 502: ErrorResponse,
                                         500: ErrorResponse})
def upload_reports(
        request,
        files: File[List[NinjaUploadedFile]],
        date_folder: str = Form(...),
        background: bool = Form(False)
):
    """
    Upload marker reports (.txt) of one intake date.

    Pipeline:
    1. Parse every report into a sample
    2. Group samples into cases by base code
    3. Replace cases already in the date sheet, append the rest

    With background=true the reports are handed to a celery worker and the
    task id is returned.
    """
    logger.info(f"📤 Received {len(files)} file(s) for {date_folder}")

    errors = []
    for file in files:
        is_valid, error = validate_report_file(file)
        if not is_valid:
            errors.append(error)

    if errors:
        return 400, UploadResponse(success=False, errors=errors)

    try:
        reports = [read_uploaded_text(file) for file in files]

        if background:
            task = upload_reports_task.delay(date_folder, reports)
            logger.info(f"Queued upload task {task.id} for {date_folder}")
            return 202, {'success': True, 'task_id': task.id}

        samples = []
        for file, content in zip(files, reports):
            sample = parse_marker_report(content)
            logger.info(f"Parsed {file.name}: {sample.code} ({len(sample.markers)} markers)")
            samples.append(sample)

        uploader = CaseUploader.from_settings(get_case_repository())
        result = uploader.upload_cases(date_folder, samples)

        if result['success']:
            return 200, UploadResponse(**result)
        return 400, UploadResponse(**result)

    except Exception as e:
        return error_response_for(e)


@upload_router.get('check-case/', response={200: CheckCaseResponse, 502: ErrorResponse, 500: ErrorResponse})
def check_case(request, date_folder: str, base_code: str):
    """Whether a case is already in the sheet of a date"""
    try:
        row = get_case_repository().find_existing_case(date_folder, base_code)
        return 200, CheckCaseResponse(exists=row is not None)

    except Exception as e:
        return error_response_for(e)
