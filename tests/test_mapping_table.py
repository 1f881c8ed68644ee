import io

import pytest

from trigger_proxy.domain.errors import MalformedRecordError, MappingLoadError
from trigger_proxy.infrastructure.mapping_table import MappingTable, build_key

SCENARIO = "repoA;main;buildA\nrepoA;dev;buildDev\nrepoB;main;buildA\n"


class TestBuildKey:
    def test_build_key_should_join_two_parts(self) -> None:
        assert build_key(["a", "b"]) == "a|b"

    def test_build_key_should_join_three_parts(self) -> None:
        assert build_key(["a", "b", "c"]) == "a|b|c"

    def test_equal_tuples_should_produce_equal_keys(self) -> None:
        assert build_key(("repo", "main")) == build_key(["repo", "main"])
        assert build_key(["repo", "main"]) != build_key(["repo", "dev"])


class TestMappingTableParse:
    def test_parse_should_resolve_scenario_lookups(self) -> None:
        table = MappingTable.parse(io.StringIO(SCENARIO))

        assert table.lookup("repoA|main") == ["buildA"]
        assert table.lookup("repoA|dev") == ["buildDev"]
        assert table.lookup("repoB|main") == ["buildA"]
        assert table.lookup("repoC|main") == []

    def test_parse_should_keep_file_order_and_duplicates(self) -> None:
        source = "repo;main;first\nrepo;main;second\nrepo;main;first\n"

        table = MappingTable.parse(io.StringIO(source))

        assert table.lookup("repo|main") == ["first", "second", "first"]
        assert len(table) == 3

    def test_parse_should_skip_blank_lines(self) -> None:
        table = MappingTable.parse(io.StringIO("repo;main;job\n\nrepo;dev;job2\n"))

        assert len(table) == 2
        assert sorted(table.keys) == ["repo|dev", "repo|main"]

    def test_parse_should_ignore_extra_fields_without_file_matching(self) -> None:
        table = MappingTable.parse(io.StringIO("repo;main;job;ignored.txt\n"))

        assert table.lookup("repo|main") == ["job"]

    def test_parse_should_reject_short_records_without_file_matching(self) -> None:
        with pytest.raises(MalformedRecordError) as exc_info:
            MappingTable.parse(io.StringIO("repo;main;job\nrepo;main\n"))

        assert exc_info.value.line_number == 2
        assert exc_info.value.field_count == 2

    def test_lookup_should_return_a_copy(self) -> None:
        table = MappingTable.parse(io.StringIO(SCENARIO))

        table.lookup("repoA|main").append("mutated")

        assert table.lookup("repoA|main") == ["buildA"]


class TestMappingTableFileMatching:
    def test_parse_should_key_on_file_column(self) -> None:
        source = "repo;main;docs-job;docs/index.md\nrepo;main;app-job;src/app.py\n"

        table = MappingTable.parse(io.StringIO(source), file_matching=True)

        assert table.lookup("repo|main|docs/index.md") == ["docs-job"]
        assert table.lookup("repo|main|src/app.py") == ["app-job"]
        assert table.lookup("repo|main") == []

    def test_parse_should_fail_entirely_on_three_field_record(self) -> None:
        source = "repo;main;job;file.txt\nrepo;main;job\n"

        with pytest.raises(MalformedRecordError):
            MappingTable.parse(io.StringIO(source), file_matching=True)

    def test_parse_should_fail_on_five_field_record(self) -> None:
        with pytest.raises(MalformedRecordError):
            MappingTable.parse(io.StringIO("repo;main;job;file;extra\n"), file_matching=True)

    def test_malformed_record_should_be_a_mapping_load_error(self) -> None:
        with pytest.raises(MappingLoadError):
            MappingTable.parse(io.StringIO("repo;main\n"), file_matching=True)


class TestMappingTableLoad:
    def test_load_should_read_file(self, tmp_path) -> None:
        path = tmp_path / "mapping.csv"
        path.write_text(SCENARIO, encoding="utf-8")

        table = MappingTable.load(str(path))

        assert len(table) == 3
        assert table.lookup("repoA|dev") == ["buildDev"]

    def test_load_should_raise_for_missing_file(self, tmp_path) -> None:
        with pytest.raises(MappingLoadError):
            MappingTable.load(str(tmp_path / "missing.csv"))
