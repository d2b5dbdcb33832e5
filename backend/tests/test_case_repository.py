"""Tests for case persistence on top of a table store."""
import pytest
from fixtures.memory_store import InMemoryTableStore
from fixtures.reports import make_markers, make_sample

from kinship.exceptions import BackingStoreError, InvalidInputError
from kinship.services.case_repository_service import CaseRepository
from kinship.services.grid_codec_service import DEFAULT_CODEC


class TestTables:
    def test_find_or_create_is_case_insensitive(self):
        store = InMemoryTableStore({'Sheet1': [], 'Oct-01': []})
        repository = CaseRepository(store)

        assert repository.find_or_create_table('OCT-01') == 'Oct-01'
        assert store.calls_to('create_table') == []

    def test_creates_missing_table(self, repository):
        assert repository.find_or_create_table('03-10-2024') == '03-10-2024'
        assert '03-10-2024' in repository.store.tables

    def test_check_connection(self, repository):
        assert repository.check_connection() is True

    def test_check_connection_propagates_store_errors(self, repository):
        repository.store.fail('list_tables')

        with pytest.raises(BackingStoreError):
            repository.check_connection()


class TestFindExistingCase:
    def test_header_rows(self, loaded_repository):
        assert loaded_repository.find_existing_case('01-10-2024', 'V2445') == 1
        assert loaded_repository.find_existing_case('01-10-2024', 'V2446') == 1 + DEFAULT_CODEC.block_height - 2

    def test_unknown_case(self, loaded_repository):
        assert loaded_repository.find_existing_case('01-10-2024', 'N2447') is None

    def test_unknown_table(self, loaded_repository):
        assert loaded_repository.find_existing_case('31-12-2024', 'V2445') is None


class TestAppendCase:
    def test_samples_are_written_in_role_order(self, repository):
        repository.store.create_table('01-10-2024')

        rows = repository.append_case('01-10-2024', [make_sample('V2445B'), make_sample('V2445A')])

        assert rows[0][0].startswith('V2445A')
        assert rows[0][3].startswith('V2445B')

    def test_no_samples(self, repository):
        with pytest.raises(InvalidInputError):
            repository.append_case('01-10-2024', [])


class TestRemoveCase:
    def test_remove_first_of_adjacent_blocks(self, loaded_repository):
        assert loaded_repository.remove_case('01-10-2024', 'V2445') is True

        cases = loaded_repository.get_table_cases('01-10-2024')
        assert [case.base_code for case in cases] == ['V2446']
        assert loaded_repository.find_existing_case('01-10-2024', 'V2446') == 1

    def test_remove_last_block(self, loaded_repository):
        assert loaded_repository.remove_case('01-10-2024', 'V2446') is True

        cases = loaded_repository.get_table_cases('01-10-2024')
        assert [case.base_code for case in cases] == ['V2445']
        assert len(cases[0].samples) == 3

    def test_remove_block_with_blank_terminator_rows(self):
        first = [make_sample('V2445A'), make_sample('V2445B')]
        second = [make_sample('V2446A'), make_sample('V2446B')]
        rows = DEFAULT_CODEC.encode(first) + DEFAULT_CODEC.encode(second)
        store = InMemoryTableStore({'01-10-2024': rows})
        repository = CaseRepository(store)

        repository.remove_case('01-10-2024', 'V2445')

        assert store.calls_to('delete_row_range') == [
            ('delete_row_range', '01-10-2024', 1, DEFAULT_CODEC.block_height),
        ]
        assert store.tables['01-10-2024'][0][0].startswith('V2446A')

    def test_missing_case(self, loaded_repository):
        assert loaded_repository.remove_case('01-10-2024', 'X9999') is False
        assert loaded_repository.store.calls_to('delete_row_range') == []

    def test_missing_table(self, loaded_repository):
        assert loaded_repository.remove_case('31-12-2024', 'V2445') is False

    def test_replace_keeps_one_copy(self, loaded_repository):
        updated = [
            make_sample('V2445A', 'Nguyen Van A', make_markers(('40', '41'))),
            make_sample('V2445B', 'Nguyen Van B', make_markers(('41', '42'))),
        ]

        loaded_repository.remove_case('01-10-2024', 'V2445')
        loaded_repository.append_case('01-10-2024', updated)

        cases = loaded_repository.get_table_cases('01-10-2024')
        assert [case.base_code for case in cases] == ['V2446', 'V2445']
        assert cases[1].samples == updated


class TestReads:
    def test_get_all_cases_in_table_order(self, loaded_repository):
        cases = loaded_repository.get_all_cases()

        assert [case.base_code for case in cases] == ['V2445', 'V2446', 'N2447']

    def test_ignored_tables_are_skipped(self, loaded_repository):
        loaded_repository.store.tables['Sheet1'] = DEFAULT_CODEC.encode([make_sample('Z0001A'), make_sample('Z0001B')])

        cases = loaded_repository.get_all_cases()

        assert 'Z0001' not in [case.base_code for case in cases]

    def test_ignored_tables_match_case_insensitively(self):
        store = InMemoryTableStore({'SHEET1': DEFAULT_CODEC.encode([make_sample('Z0001A')])})

        assert CaseRepository(store, ignored_tables=['sheet1']).get_all_cases() == []

    def test_decoded_samples_keep_names(self, loaded_repository):
        case = loaded_repository.get_table_cases('02-10-2024')[0]

        assert [sample.name for sample in case.samples] == ['Pham Van F', 'Pham Thi G']
