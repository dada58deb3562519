"""Tests for the report package: discovery, per-file checks, aggregation and rendering."""

from __future__ import annotations

from pathlib import Path

from perlminver.engine.resolver import VersionResolver
from perlminver.report import (
    BatchReport,
    FileReport,
    aggregate,
    check_file,
    discover_files,
    is_perl_file,
    render_table,
)

EXTENSIONS = [".pl", ".pm", ".t"]


class TestDiscovery:
    def test_walks_directory_sorted(self, perl_tree: Path):
        found = list(discover_files([perl_tree], EXTENSIONS))
        assert found == [perl_tree / "hello.pl", perl_tree / "lib" / "Foo.pm"]

    def test_skips_vcs_dirs(self, perl_tree: Path):
        found = list(discover_files([perl_tree], EXTENSIONS))
        assert not any(".git" in path.parts for path in found)

    def test_explicit_file_yielded_as_is(self, tmp_path: Path):
        path = tmp_path / "notes.txt"
        path.write_text("text")
        assert list(discover_files([path], EXTENSIONS)) == [path]

    def test_missing_path_passed_through(self, tmp_path: Path):
        missing = tmp_path / "missing.pl"
        assert list(discover_files([missing], EXTENSIONS)) == [missing]

    def test_custom_extensions(self, tmp_path: Path):
        (tmp_path / "a.cgi").write_text("print 1;")
        (tmp_path / "b.pl").write_text("print 1;")
        assert list(discover_files([tmp_path], [".cgi"])) == [tmp_path / "a.cgi"]

    def test_shebang_detection(self, tmp_path: Path):
        script = tmp_path / "tool"
        script.write_text("#!/usr/bin/env perl\nprint 1;\n")
        shell = tmp_path / "run"
        shell.write_text("#!/bin/sh\necho hi\n")
        assert is_perl_file(script, EXTENSIONS)
        assert not is_perl_file(shell, EXTENSIONS)

    def test_other_suffix_not_perl(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text("#!perl")
        assert not is_perl_file(path, EXTENSIONS)


class TestCheckFile:
    def test_plain_script(self, plain_script: Path):
        report = check_file(plain_script, VersionResolver())
        assert report.ok
        assert report.minimum == "5.004"
        assert report.explicit is None
        assert report.syntax is None
        assert report.inconsistent is False
        assert report.markers == []

    def test_module(self, our_module: Path):
        report = check_file(our_module, VersionResolver())
        assert report.minimum == "5.006"
        assert report.syntax == "5.006"
        assert report.path == str(our_module)

    def test_inconsistent(self, inconsistent_module: Path):
        report = check_file(inconsistent_module, VersionResolver())
        assert report.minimum == "5.006"
        assert report.explicit == "5.005"
        assert report.syntax == "5.006"
        assert report.inconsistent is True

    def test_explain(self, inconsistent_module: Path):
        report = check_file(inconsistent_module, VersionResolver(), explain=True)
        assert [(m.version, m.rules) for m in report.markers] == [
            ("5.006", ["any_attributes"]),
            ("5.005", ["explicit_version"]),
        ]

    def test_missing_file(self, tmp_path: Path):
        report = check_file(tmp_path / "gone.pl", VersionResolver())
        assert not report.ok
        assert report.minimum is None
        assert "cannot read" in (report.error or "")

    def test_latin1_file(self, tmp_path: Path):
        path = tmp_path / "legacy.pl"
        path.write_bytes(b"# Caf\xe9\nprint 1;\n")
        report = check_file(path, VersionResolver())
        assert report.ok
        assert report.minimum == "5.004"

    def test_binary_file(self, tmp_path: Path):
        path = tmp_path / "blob.pl"
        path.write_bytes(b"\x7fELF\x00\x01")
        report = check_file(path, VersionResolver())
        assert not report.ok
        assert "binary" in (report.error or "")

    def test_parse_error(self, tmp_path: Path):
        path = tmp_path / "broken.pl"
        path.write_text("sub broken {\n")
        report = check_file(path, VersionResolver())
        assert not report.ok
        assert "broken.pl" in (report.error or "")


class TestAggregate:
    def test_overall_minimum(self, plain_script: Path, our_module: Path):
        resolver = VersionResolver()
        batch = aggregate([check_file(plain_script, resolver), check_file(our_module, resolver)])
        assert batch.minimum == "5.006"
        assert batch.errors == 0
        assert batch.inconsistent == []
        assert len(batch.files) == 2

    def test_errors_excluded_from_minimum(self, plain_script: Path, tmp_path: Path):
        resolver = VersionResolver()
        batch = aggregate(
            [check_file(plain_script, resolver), check_file(tmp_path / "gone.pl", resolver)]
        )
        assert batch.minimum == "5.004"
        assert batch.errors == 1

    def test_inconsistent_listed(self, inconsistent_module: Path):
        batch = aggregate([check_file(inconsistent_module, VersionResolver())])
        assert batch.inconsistent == [str(inconsistent_module)]

    def test_empty(self):
        batch = aggregate([])
        assert batch.minimum is None
        assert batch.files == []

    def test_only_errors(self):
        batch = aggregate([FileReport(path="x.pl", error="boom")])
        assert batch.minimum is None
        assert batch.errors == 1

    def test_json_round_trip(self, our_module: Path):
        batch = aggregate([check_file(our_module, VersionResolver())])
        restored = BatchReport.model_validate_json(batch.model_dump_json())
        assert restored == batch


class TestRenderTable:
    def test_columns_and_footer(self):
        batch = BatchReport(
            files=[FileReport(path="a.pl", minimum="5.006", syntax="5.006")],
            minimum="5.006",
        )
        text = render_table(batch)
        lines = text.splitlines()
        assert lines[0].split() == ["File", "Minimum", "Explicit", "Syntax"]
        assert lines[1].split() == ["a.pl", "5.006", "-", "5.006"]
        assert "Files checked: 1" in text
        assert "Minimum version: 5.006" in text
        assert "Inconsistent" not in text
        assert "Errors" not in text

    def test_error_row(self):
        batch = BatchReport(files=[FileReport(path="bad.pl", error="line 3: oops")], errors=1)
        text = render_table(batch)
        assert "unknown" in text.splitlines()[1]
        assert "error: line 3: oops" in text
        assert "Errors: 1" in text
        assert "Minimum version: unknown" in text

    def test_inconsistent_row(self):
        report = FileReport(
            path="m.pm", minimum="5.006", explicit="5.005", syntax="5.006", inconsistent=True
        )
        batch = BatchReport(files=[report], minimum="5.006", inconsistent=["m.pm"])
        text = render_table(batch)
        assert "explicit version below syntax requirement" in text
        assert "Inconsistent: 1" in text

    def test_explain_lists_markers(self, our_module: Path):
        report = check_file(our_module, VersionResolver(), explain=True)
        text = render_table(aggregate([report]), explain=True)
        assert "any_our_variables" in text

    def test_markers_hidden_without_explain(self, our_module: Path):
        report = check_file(our_module, VersionResolver(), explain=True)
        text = render_table(aggregate([report]))
        assert "any_our_variables" not in text
