"""Tests for the record models."""
import pytest
from pydantic import ValidationError

from kinship.schemas import CaseRecord, SampleRecord


class TestSampleRecord:
    def test_code_parts(self):
        sample = SampleRecord(code='V2445B', name='Tran Thi B')

        assert sample.base_code == 'V2445'
        assert sample.role == 'B'
        assert sample.is_reference is False
        assert sample.header == 'V2445B Tran Thi B'

    def test_fields_are_frozen(self):
        sample = SampleRecord(code='V2445A')

        with pytest.raises(ValidationError):
            sample.code = 'V2445B'

    def test_markers_are_read_only(self):
        sample = SampleRecord(code='V2445A', markers={'vWA': ('16', '13')})

        with pytest.raises(TypeError):
            sample.markers['TPOX'] = ('8', '11')

        assert dict(sample.markers) == {'vWA': ('16', '13')}

    def test_default_markers_are_read_only(self):
        with pytest.raises(TypeError):
            SampleRecord().markers['TPOX'] = ('8', '11')

    def test_source_mapping_is_copied(self):
        markers = {'vWA': ('16', '13')}
        sample = SampleRecord(code='V2445A', markers=markers)

        markers['TPOX'] = ('8', '11')

        assert 'TPOX' not in sample.markers

    def test_dump(self):
        sample = SampleRecord(code='V2445A', name='A', markers={'vWA': ('16', '13')})

        assert sample.model_dump() == {'code': 'V2445A', 'name': 'A', 'markers': {'vWA': ('16', '13')}}
        assert sample.model_dump(mode='json')['markers'] == {'vWA': ['16', '13']}

    def test_equality(self):
        first = SampleRecord(code='V2445A', markers={'vWA': ('16', '13')})
        second = SampleRecord(code='V2445A', markers={'vWA': ['16', '13']})

        assert first == second


class TestCaseRecord:
    def test_single_sample_case_is_anomalous(self):
        case = CaseRecord(base_code='V2445', samples=[SampleRecord(code='V2445A')])

        assert case.is_anomalous
        assert case.sample_codes == ['V2445A']
