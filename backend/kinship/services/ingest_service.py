"""
Ingest Service
==============
Writes parsed marker reports into the date table, one block per case.

Handles:
- Grouping samples into cases by base code (V2445A + V2445B → V2445)
- Replacing a case that is already in the table (remove, then append)
- Retrying each store call separately on BackingStoreError
- Reading a date folder from disk (date/<case folder>/<report>.txt)
"""
import logging
import os
import time
from typing import Any, Callable, Dict, List, Sequence

from django.conf import settings
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from kinship.constants import CASE_CODE_PATTERN
from kinship.exceptions import BackingStoreError
from kinship.schemas import SampleRecord
from kinship.services.case_repository_service import CaseRepository
from kinship.services.report_parser_service import parse_marker_report

logger = logging.getLogger(__name__)

REPORT_EXTENSION = '.txt'


def group_samples_by_case(samples: Sequence[SampleRecord]) -> Dict[str, List[SampleRecord]]:
    """
    Group samples by base code.

    Cases come out ordered by base code (prefix letter, year, sequence), which
    is the order they are written to the table.
    """
    groups: Dict[str, List[SampleRecord]] = {}
    for sample in samples:
        if not sample.code:
            logger.warning(f"⚠️ Skipping report without sample code ({len(sample.markers)} markers)")
            continue
        groups.setdefault(sample.base_code, []).append(sample)

    return dict(sorted(groups.items()))


class CaseUploader:
    """
    Uploads cases into one date table.

    Args:
        repository: Case repository to write through
        retry_attempts: Attempts per store step
        retry_wait: Exponential backoff multiplier in seconds
        throttle_seconds: Pause after each store write (Sheets write quota)
    """

    def __init__(
            self,
            repository: CaseRepository,
            retry_attempts: int = 3,
            retry_wait: float = 1.0,
            throttle_seconds: float = 1.0
    ):
        self.repository = repository
        self.retry_attempts = retry_attempts
        self.retry_wait = retry_wait
        self.throttle_seconds = throttle_seconds

    @classmethod
    def from_settings(cls, repository: CaseRepository) -> 'CaseUploader':
        return cls(
            repository,
            retry_attempts=settings.KINSHIP_STORE_RETRY_ATTEMPTS,
            retry_wait=settings.KINSHIP_STORE_RETRY_WAIT,
            throttle_seconds=settings.KINSHIP_UPLOAD_THROTTLE_SECONDS,
        )

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=self.retry_wait, max=30),
            retry=retry_if_exception_type(BackingStoreError),
            reraise=True,
        )

    def _with_retry(self, step: Callable, *args) -> Any:
        return self._retrying()(step, *args)

    def _append_case(self, table: str, base_code: str, samples: Sequence[SampleRecord]) -> None:
        """
        Append a case with retries.

        Append is not idempotent: a failed call may still have been written.
        Every retry first looks the case up and stops when it is already there.
        """
        for attempt in self._retrying():
            with attempt:
                if attempt.retry_state.attempt_number > 1 and \
                        self.repository.find_existing_case(table, base_code) is not None:
                    logger.warning(f"⚠️ Case {base_code} was written by a failed attempt, not appending again")
                    return
                self.repository.append_case(table, samples)

    def _pause(self) -> None:
        if self.throttle_seconds > 0:
            time.sleep(self.throttle_seconds)

    def upload_cases(self, date_bucket: str, samples: Sequence[SampleRecord]) -> Dict[str, Any]:
        """
        Write every case of the given samples into the table of a date bucket.

        A case already present in that table is replaced. Remove and append are
        separate store calls, each retried on its own.

        Args:
            date_bucket: Intake date, used as table name
            samples: Parsed samples, any order

        Returns:
            {
                'success': True/False,
                'table': 'stored table title',
                'cases': ['V2445', ...],     # written
                'replaced': ['V2445', ...],  # existed before
                'errors': [...],
            }
        """
        case_groups = group_samples_by_case(samples)
        if not case_groups:
            return {
                'success': False,
                'table': None,
                'cases': [],
                'replaced': [],
                'errors': ['No samples with a sample code to upload'],
            }

        table = self._with_retry(self.repository.find_or_create_table, date_bucket)
        logger.info(f"📤 Uploading cases {list(case_groups)} to sheet {table}")

        written: List[str] = []
        replaced: List[str] = []
        errors: List[str] = []

        for base_code, case_samples in case_groups.items():
            try:
                if self._with_retry(self.repository.remove_case, table, base_code):
                    replaced.append(base_code)
                    self._pause()

                self._append_case(table, base_code, case_samples)
                written.append(base_code)
                self._pause()

            except BackingStoreError as e:
                logger.error(f"❌ Failed to upload case {base_code}: {e}", exc_info=True)
                errors.append(f"Failed to upload case {base_code}")

        return {
            'success': not errors,
            'table': table,
            'cases': written,
            'replaced': replaced,
            'errors': errors,
        }


# ============================================================
# DATE FOLDERS ON DISK
# ============================================================

def collect_date_folder(folder_path: str) -> List[SampleRecord]:
    """
    Parse every report of a date folder.

    Layout: <date>/<case folder>/*.txt, where case folders start with a
    sample code (e.g. 'V2445A'). Other folders and files are ignored.

    Args:
        folder_path: Path of the date folder

    Returns:
        Parsed samples in folder order
    """
    samples: List[SampleRecord] = []

    case_folders = sorted(
        entry for entry in os.listdir(folder_path)
        if CASE_CODE_PATTERN.match(entry) and os.path.isdir(os.path.join(folder_path, entry))
    )

    for case_folder in case_folders:
        case_path = os.path.join(folder_path, case_folder)
        reports = sorted(name for name in os.listdir(case_path) if name.endswith(REPORT_EXTENSION))

        for report in reports:
            with open(os.path.join(case_path, report), encoding='utf-8') as handle:
                sample = parse_marker_report(handle.read())
            logger.info(f"Parsed {case_folder}/{report}: {sample.code} ({len(sample.markers)} markers)")
            samples.append(sample)

    logger.info(f"✅ Collected {len(samples)} reports from {folder_path}")
    return samples
