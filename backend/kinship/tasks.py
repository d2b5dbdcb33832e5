import logging
import os

from celery import shared_task

from kinship.exceptions import BackingStoreError
from kinship.services.case_repository_service import get_case_repository
from kinship.services.ingest_service import CaseUploader, collect_date_folder
from kinship.services.report_parser_service import parse_marker_report

logger = logging.getLogger(__name__)


@shared_task
def ingest_date_folder_task(folder_path):
    """
    Upload every marker report of a date folder

    The folder name is the date bucket (table name); case sub-folders hold
    one .txt report per sample.

    Args:
        folder_path: Absolute path of the date folder

    Returns:
        dict with success, errors, table, cases, replaced
    """
    try:
        if not os.path.isdir(folder_path):
            logger.error(f"Folder not found: {folder_path}")
            return {
                "success": False,
                "errors": ["Folder not found"],
            }

        date_bucket = os.path.basename(os.path.normpath(folder_path))
        logger.info(f"Starting data upload from: {folder_path} (sheet {date_bucket})")

        # ⭐ STEP 1: Parse reports
        samples = collect_date_folder(folder_path)
        if not samples:
            logger.error(f"No marker reports found in {folder_path}")
            return {
                "success": False,
                "errors": ["No marker reports found"],
            }

        # ⭐ STEP 2: Write cases
        uploader = CaseUploader.from_settings(get_case_repository())
        result = uploader.upload_cases(date_bucket, samples)

        if result['success']:
            logger.info(f"✅ Successfully uploaded {len(result['cases'])} cases from {folder_path}")

        return result

    except BackingStoreError as e:
        logger.error(f"Storage error uploading {folder_path}: {e}", exc_info=True)
        return {
            "success": False,
            "errors": ["Spreadsheet storage is unavailable"],
        }

    except Exception as e:
        logger.error(f"Unexpected error uploading {folder_path}: {e}", exc_info=True)
        return {
            "success": False,
            "errors": ["An unexpected error occurred"],
        }


@shared_task
def upload_reports_task(date_bucket, reports):
    """
    Parse raw report texts and upload them to a date table

    Args:
        date_bucket: Intake date (table name)
        reports: List of raw report texts

    Returns:
        dict with success, errors, table, cases, replaced
    """
    try:
        logger.info(f"Processing {len(reports)} reports for {date_bucket}")

        samples = [parse_marker_report(content) for content in reports]

        uploader = CaseUploader.from_settings(get_case_repository())
        return uploader.upload_cases(date_bucket, samples)

    except BackingStoreError as e:
        logger.error(f"Storage error uploading reports for {date_bucket}: {e}", exc_info=True)
        return {
            "success": False,
            "errors": ["Spreadsheet storage is unavailable"],
        }

    except Exception as e:
        logger.error(f"Unexpected error uploading reports for {date_bucket}: {e}", exc_info=True)
        return {
            "success": False,
            "errors": ["An unexpected error occurred"],
        }
