from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, field_serializer, field_validator

from kinship.constants import BASE_CODE_LENGTH, REFERENCE_ROLE_SUFFIX

AllelePair = Tuple[str, str]

EMPTY_PAIR: AllelePair = ('', '')


class Conclusion(str, Enum):
    BLOOD_RELATION = 'Blood Relation'
    NO_BLOOD_RELATION = 'No Blood Relation'


class SampleRecord(BaseModel):
    """One tested sample: lab code, display name and marker → allele pair"""
    code: str = ''
    name: str = ''
    markers: Dict[str, AllelePair] = Field(default_factory=dict, validate_default=True)

    class Config:
        frozen = True

    @field_validator('markers', mode='after')
    @classmethod
    def freeze_markers(cls, markers: Dict[str, AllelePair]) -> Mapping[str, AllelePair]:
        # Read-only view; records are shared between comparison results
        return MappingProxyType(dict(markers))

    @field_serializer('markers')
    def serialize_markers(self, markers: Mapping[str, AllelePair]) -> Dict[str, AllelePair]:
        return dict(markers)

    @property
    def base_code(self) -> str:
        return self.code[:BASE_CODE_LENGTH]

    @property
    def role(self) -> str:
        return self.code[-1:] if len(self.code) > BASE_CODE_LENGTH else ''

    @property
    def is_reference(self) -> bool:
        return self.code.endswith(REFERENCE_ROLE_SUFFIX)

    @property
    def header(self) -> str:
        return f"{self.code} {self.name}"


class CaseRecord(BaseModel):
    """Samples submitted together under one base code"""
    base_code: str
    samples: List[SampleRecord] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def is_anomalous(self) -> bool:
        # A case normally has a reference sample and at least one comparison sample
        return len(self.samples) < 2

    @property
    def sample_codes(self) -> List[str]:
        return [sample.code for sample in self.samples]


class ComparisonResult(BaseModel):
    sample1: SampleRecord
    sample2: SampleRecord
    matches: List[str]
    mismatches: List[str]
    conclusion: Conclusion

    class Config:
        frozen = True

    @property
    def is_blood_relation(self) -> bool:
        return self.conclusion == Conclusion.BLOOD_RELATION


# ============================================================
# API SCHEMAS
# ============================================================

class CompareParams(BaseModel):
    code: Optional[str] = None
    code1: Optional[str] = None
    code2: Optional[str] = None


class CompareRequest(BaseModel):
    type: str
    params: CompareParams = Field(default_factory=CompareParams)


class UploadResponse(BaseModel):
    success: bool
    table: Optional[str] = None
    cases: List[str] = Field(default_factory=list)
    replaced: List[str] = Field(default_factory=list)
    errors: Optional[List[str]] = Field(default=None)


class CheckCaseResponse(BaseModel):
    exists: bool


class ReportResponse(BaseModel):
    filename: str
    context: Dict[str, Any]


class CaseListResponse(BaseModel):
    data: List[CaseRecord]
    total: int = 0


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
