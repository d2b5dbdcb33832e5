"""
Marker Comparison Service
=========================
Compares samples marker by marker and concludes on blood relation.

Rule per marker: the two allele pairs must share at least ONE value (a child
inherits one allele from each parent). Example: vWA 16,13 vs 11,13 → match.

Conclusion: "Blood Relation" when at most one marker mismatches (one mutation
is tolerated), otherwise "No Blood Relation".

Strategies:
    - family:    reference sample (A) vs every other sample of its case
    - same day:  one sample vs every sample of every OTHER case
    - all:       one sample vs every other sample, own case included
    - two:       direct pairwise comparison
"""
import logging
from typing import Iterable, List, Optional, Sequence

from django.conf import settings

from kinship.constants import DEFAULT_CATALOG, MISMATCH_TOLERANCE, MarkerCatalog
from kinship.exceptions import InvalidInputError, NotFoundError
from kinship.schemas import (
    AllelePair,
    CaseRecord,
    ComparisonResult,
    Conclusion,
    EMPTY_PAIR,
    SampleRecord,
)
from kinship.services.case_repository_service import get_case_repository

logger = logging.getLogger(__name__)


def has_matching_alleles(values1: Sequence[str], values2: Sequence[str]) -> bool:
    """At least one allele in common (exact string equality, order ignored)"""
    return bool(set(values1) & set(values2))


def compare_two_samples(
        sample1: Optional[SampleRecord],
        sample2: Optional[SampleRecord],
        catalog: MarkerCatalog = DEFAULT_CATALOG,
        mismatch_tolerance: int = MISMATCH_TOLERANCE
) -> ComparisonResult:
    """
    Compare two samples over every catalog marker.

    A marker missing from a sample counts as ('', ''), so a marker missing
    from BOTH samples matches.

    Args:
        sample1: First sample
        sample2: Second sample
        catalog: Marker set, in output order
        mismatch_tolerance: Mismatches still concluded as blood relation

    Returns:
        ComparisonResult with matches/mismatches in catalog order

    Raises:
        InvalidInputError: If a sample or its marker mapping is missing
    """
    if sample1 is None or sample2 is None:
        logger.error(f"❌ Invalid samples: {sample1!r}, {sample2!r}")
        raise InvalidInputError("Invalid samples provided for comparison")

    markers1 = getattr(sample1, 'markers', None)
    markers2 = getattr(sample2, 'markers', None)
    if markers1 is None or markers2 is None:
        logger.error(
            f"❌ Missing markers: {getattr(sample1, 'code', None)} has markers={markers1 is not None}, "
            f"{getattr(sample2, 'code', None)} has markers={markers2 is not None}"
        )
        raise InvalidInputError("Missing marker data for comparison")

    matches: List[str] = []
    mismatches: List[str] = []

    for marker in catalog.order():
        values1: AllelePair = markers1.get(marker, EMPTY_PAIR)
        values2: AllelePair = markers2.get(marker, EMPTY_PAIR)

        if has_matching_alleles(values1, values2):
            matches.append(marker)
        else:
            mismatches.append(marker)

    conclusion = (
        Conclusion.BLOOD_RELATION
        if len(mismatches) <= mismatch_tolerance
        else Conclusion.NO_BLOOD_RELATION
    )

    logger.debug(
        f"Compared {sample1.code} / {sample2.code}: "
        f"{len(matches)} matches, {len(mismatches)} mismatches → {conclusion.value}"
    )

    return ComparisonResult(
        sample1=sample1,
        sample2=sample2,
        matches=matches,
        mismatches=mismatches,
        conclusion=conclusion,
    )


def sort_by_conclusion(results: Iterable[ComparisonResult]) -> List[ComparisonResult]:
    """Blood relations first; order otherwise kept"""
    return sorted(results, key=lambda result: not result.is_blood_relation)


class MarkerComparisonService:
    """
    Comparison strategies over every case in the repository.

    Args:
        repository: Anything with get_all_cases() (normally a CaseRepository)
        catalog: Marker set
        mismatch_tolerance: Mismatches still concluded as blood relation
    """

    def __init__(
            self,
            repository,
            catalog: MarkerCatalog = DEFAULT_CATALOG,
            mismatch_tolerance: int = MISMATCH_TOLERANCE
    ):
        self.repository = repository
        self.catalog = catalog
        self.mismatch_tolerance = mismatch_tolerance

    def compare(self, sample1: SampleRecord, sample2: SampleRecord) -> ComparisonResult:
        return compare_two_samples(sample1, sample2, self.catalog, self.mismatch_tolerance)

    @staticmethod
    def _find_sample(cases: Sequence[CaseRecord], code: str) -> Optional[SampleRecord]:
        for case in cases:
            for sample in case.samples:
                if sample.code == code:
                    return sample
        return None

    def find_sample(self, code: str) -> Optional[SampleRecord]:
        return self._find_sample(self.repository.get_all_cases(), code)

    def compare_family(self, base_code: str) -> List[ComparisonResult]:
        """
        Reference sample (role A) vs every other sample of the same case.

        Raises:
            NotFoundError: If the case or its reference sample does not exist
        """
        all_cases = self.repository.get_all_cases()
        logger.info(f"🔍 Searching for case with base code: {base_code}")

        target_case = next((case for case in all_cases if case.base_code == base_code), None)
        if target_case is None:
            raise NotFoundError(f"No case found with base code {base_code}")

        logger.info(f"Found case {target_case.base_code} with samples: {target_case.sample_codes}")

        reference = next((sample for sample in target_case.samples if sample.is_reference), None)
        if reference is None:
            raise NotFoundError(f"No sample A found for case {base_code}")

        results = []
        for other in target_case.samples:
            if other.code == reference.code:
                continue
            logger.info(f"Comparing {reference.code} with {other.code}")
            results.append(self.compare(reference, other))

        return results

    def compare_same_day(self, sample_code: str) -> List[ComparisonResult]:
        """
        One sample vs every sample outside its own case.

        Raises:
            NotFoundError: If the sample does not exist
        """
        all_cases = self.repository.get_all_cases()
        target = self._find_sample(all_cases, sample_code)
        if target is None:
            raise NotFoundError(f"Sample {sample_code} not found")

        base_code = target.base_code
        results = [
            self.compare(target, sample)
            for case in all_cases
            for sample in case.samples
            if not sample.code.startswith(base_code)
        ]

        logger.info(f"✅ {sample_code}: {len(results)} comparisons outside case {base_code}")
        return sort_by_conclusion(results)

    def compare_all_database(self, sample_code: str) -> List[ComparisonResult]:
        """
        One sample vs every other sample, its own case included.

        Raises:
            NotFoundError: If the sample does not exist
        """
        all_cases = self.repository.get_all_cases()
        target = self._find_sample(all_cases, sample_code)
        if target is None:
            raise NotFoundError(f"Sample {sample_code} not found")

        results = [
            self.compare(target, sample)
            for case in all_cases
            for sample in case.samples
            if sample.code != target.code
        ]

        logger.info(f"✅ {sample_code}: {len(results)} comparisons across the database")
        return sort_by_conclusion(results)

    def compare_samples(self, code1: str, code2: str) -> List[ComparisonResult]:
        """
        Direct comparison of two samples.

        Raises:
            NotFoundError: If either sample does not exist
        """
        all_cases = self.repository.get_all_cases()
        sample1 = self._find_sample(all_cases, code1)
        sample2 = self._find_sample(all_cases, code2)

        if sample1 is None or sample2 is None:
            missing = [code for code, sample in ((code1, sample1), (code2, sample2)) if sample is None]
            raise NotFoundError(f"Samples not found: {', '.join(missing)}")

        return [self.compare(sample1, sample2)]


def get_comparison_service() -> MarkerComparisonService:
    """Comparison service over the configured case repository"""
    return MarkerComparisonService(
        get_case_repository(),
        mismatch_tolerance=settings.KINSHIP_MISMATCH_TOLERANCE,
    )
