"""Tests for the marker report parser."""
from fixtures.reports import REPORT_HEADER, make_report

from kinship.schemas import SampleRecord
from kinship.services.report_parser_service import parse_marker_report


def _report(*lines: str) -> str:
    return '\n'.join([REPORT_HEADER, *lines]) + '\n'


class TestSampleIdentity:
    """Code and name come from the sample column of the first data line."""

    def test_code_and_name_split_on_first_space(self):
        sample = parse_marker_report(_report('a.fsa\tV2445A Nguyen Van A\tvWA\t16\t13'))

        assert sample.code == 'V2445A'
        assert sample.name == 'Nguyen Van A'
        assert sample.base_code == 'V2445'
        assert sample.role == 'A'

    def test_first_line_wins(self):
        sample = parse_marker_report(_report(
            'a.fsa\tV2445A Nguyen Van A\tvWA\t16\t13',
            'b.fsa\tV9999B Someone Else\tTPOX\t8\t11',
        ))

        assert sample.code == 'V2445A'
        assert sample.name == 'Nguyen Van A'

    def test_empty_first_column(self):
        sample = parse_marker_report(_report('\tV2445A Nguyen Van A\tvWA\t16\t13'))

        assert sample.code == 'V2445A'
        assert sample.name == 'Nguyen Van A'
        assert sample.markers == {'vWA': ('16', '13')}

    def test_name_spacing_is_kept(self):
        sample = parse_marker_report(_report('a.fsa\tV2445A Nguyen  Van A\tvWA\t16\t13'))

        assert sample.name == 'Nguyen  Van A'

    def test_header_line_is_not_data(self):
        sample = parse_marker_report(_report('a.fsa\tV2445A Nguyen Van A\tvWA\t16\t13'))

        assert 'Marker' not in sample.markers
        assert list(sample.markers) == ['vWA']


class TestAlleleCalls:
    def test_two_allele_call(self):
        sample = parse_marker_report(_report('a.fsa\tV2445A Name\tD3S1358\t14\t15'))

        assert sample.markers['D3S1358'] == ('14', '15')

    def test_single_allele_call_is_homozygous(self):
        sample = parse_marker_report(_report('a.fsa\tV2445A Name\tTH01\t9.3'))

        assert sample.markers['TH01'] == ('9.3', '9.3')

    def test_two_allele_call_wins_over_earlier_single_call(self):
        sample = parse_marker_report(_report(
            'a.fsa\tV2445A Name\tvWA\t16',
            'a.fsa\tV2445A Name\tvWA\t16\t17',
        ))

        assert sample.markers['vWA'] == ('16', '17')

    def test_first_two_allele_call_wins(self):
        sample = parse_marker_report(_report(
            'a.fsa\tV2445A Name\tvWA\t16\t17',
            'a.fsa\tV2445A Name\tvWA\t18\t19',
        ))

        assert sample.markers['vWA'] == ('16', '17')

    def test_lines_without_marker_or_alleles_are_dropped(self):
        sample = parse_marker_report(_report(
            'a.fsa\tV2445A Name\t\t16\t17',
            'a.fsa\tV2445A Name\tFGA',
            'garbage',
        ))

        assert sample.markers == {}
        assert sample.code == 'V2445A'

    def test_cells_are_trimmed(self):
        sample = parse_marker_report(_report('a.fsa\t V2445A Name \t Penta E \t 5 \t 12 '))

        assert sample.markers['Penta E'] == ('5', '12')

    def test_full_report(self):
        markers = {'D3S1358': ('14', '15'), 'TH01': ('9.3', '9.3'), 'AMEL': ('X', 'Y')}

        sample = parse_marker_report(make_report('V2445B', 'Tran Thi B', markers))

        assert sample.markers == markers
        assert sample.name == 'Tran Thi B'


class TestBlankInput:
    def test_empty_string(self):
        assert parse_marker_report('') == SampleRecord()

    def test_none(self):
        assert parse_marker_report(None) == SampleRecord()

    def test_header_only(self):
        sample = parse_marker_report(REPORT_HEADER + '\n')

        assert sample.code == ''
        assert sample.markers == {}
