"""Pytest configuration and fixtures for the kinship marker database tests."""
import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault('NINJA_SKIP_REGISTRY', 'yes')

sys.path.insert(0, str(Path(__file__).parent))

from fixtures.memory_store import InMemoryTableStore  # noqa: E402
from fixtures.reports import make_markers, make_report, make_sample  # noqa: E402

from kinship.services.case_repository_service import CaseRepository  # noqa: E402
from kinship.services.comparison_service import MarkerComparisonService  # noqa: E402


@pytest.fixture
def store() -> InMemoryTableStore:
    return InMemoryTableStore({'Sheet1': []})


@pytest.fixture
def repository(store) -> CaseRepository:
    return CaseRepository(store)


@pytest.fixture
def family_case():
    """Case V2445: reference A, a child B sharing one allele everywhere, an unrelated C."""
    return [
        make_sample('V2445A', 'Nguyen Van A', make_markers(('10', '11'))),
        make_sample('V2445B', 'Nguyen Van B', make_markers(('11', '12'))),
        make_sample('V2445C', 'Tran Thi C', make_markers(('20', '21'))),
    ]


@pytest.fixture
def loaded_repository(repository, family_case) -> CaseRepository:
    """Two date sheets, three cases."""
    repository.store.create_table('01-10-2024')
    repository.store.create_table('02-10-2024')

    repository.append_case('01-10-2024', family_case)
    repository.append_case('01-10-2024', [
        make_sample('V2446A', 'Le Van D', make_markers(('10', '11'))),
        make_sample('V2446B', 'Le Thi E', make_markers(('10', '13'))),
    ])
    repository.append_case('02-10-2024', [
        make_sample('N2447A', 'Pham Van F', make_markers(('30', '31'))),
        make_sample('N2447B', 'Pham Thi G', make_markers(('31', '32'))),
    ])
    repository.store.calls.clear()
    return repository


@pytest.fixture
def comparison_service(loaded_repository) -> MarkerComparisonService:
    return MarkerComparisonService(loaded_repository)


@pytest.fixture
def fast_uploads(settings):
    """No throttling or backoff between store calls."""
    settings.KINSHIP_UPLOAD_THROTTLE_SECONDS = 0
    settings.KINSHIP_STORE_RETRY_WAIT = 0
    settings.KINSHIP_STORE_RETRY_ATTEMPTS = 3
    return settings


@pytest.fixture
def report_text():
    return make_report('V2445A', 'Nguyen Van A', make_markers(('10', '11')))
