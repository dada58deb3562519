"""Tests for engine/scanner.py."""

from __future__ import annotations

import pytest

from perlminver.document import Document, Word, parse_document
from perlminver.engine.models import VersionMarker
from perlminver.engine.registry import RegistryBuilder
from perlminver.engine.rules import default_registry
from perlminver.engine.scanner import SyntaxScanner
from perlminver.version import NOT_FOUND, Found, PerlVersion, ScanError


def v(text: str) -> PerlVersion:
    return PerlVersion.parse(text)


@pytest.fixture
def scanner() -> SyntaxScanner:
    return SyntaxScanner(default_registry())


class TestScanFirst:
    def test_plain_script(self, scanner: SyntaxScanner):
        assert scanner.scan_first(parse_document("print 1;")) == NOT_FOUND

    def test_highest_match_wins(self, scanner: SyntaxScanner):
        doc = parse_document("our $x = qr/a/;\nuse mro;\n")
        assert scanner.scan_first(doc) == Found(v("5.010"))

    def test_limit_below_match(self, scanner: SyntaxScanner):
        doc = parse_document("our $x;")
        assert scanner.scan_first(doc, v("5.005")) == Found(v("5.006"))

    def test_limit_at_match(self, scanner: SyntaxScanner):
        doc = parse_document("our $x;")
        assert scanner.scan_first(doc, v("5.006")) == NOT_FOUND

    def test_limit_above_match(self, scanner: SyntaxScanner):
        doc = parse_document("our $x;")
        assert scanner.scan_first(doc, v("5.008")) == NOT_FOUND

    def test_limit_does_not_change_answer_above_it(self, scanner: SyntaxScanner):
        doc = parse_document("use utf8;\nour $x;\n")
        unlimited = scanner.scan_first(doc)
        for limit in ("5.004", "5.005", "5.006", "5.006001"):
            assert scanner.scan_first(doc, v(limit)) == unlimited

    def test_point_release_rule(self, scanner: SyntaxScanner):
        doc = parse_document("print $^E if $!;")
        assert scanner.scan_first(doc) == Found(v("5.004005"))

    def test_rules_at_or_below_limit_not_evaluated(self):
        calls: list[str] = []

        def record(name: str):
            def predicate(document: Document) -> bool:
                calls.append(name)
                return False

            return predicate

        registry = (
            RegistryBuilder()
            .register("high", "5.010", record("high"))
            .register("mid", "5.008", record("mid"))
            .register("low", "5.006", record("low"))
            .build()
        )
        SyntaxScanner(registry).scan_first(parse_document("print 1;"), v("5.008"))
        assert calls == ["high"]

    def test_stops_at_first_match(self):
        calls: list[str] = []

        def hit(document: Document) -> bool:
            calls.append("hit")
            return True

        def miss(document: Document) -> bool:
            calls.append("miss")
            return False

        registry = RegistryBuilder().register("a", "5.010", hit).register("b", "5.008", miss).build()
        assert SyntaxScanner(registry).scan_first(parse_document("1;")) == Found(v("5.010"))
        assert calls == ["hit"]

    def test_malformed_document(self, scanner: SyntaxScanner):
        doc = Document(children=(Word("print", 1), object()))  # type: ignore[arg-type]
        result = scanner.scan_first(doc)
        assert isinstance(result, ScanError)


class TestScanAll:
    def test_no_matches(self, scanner: SyntaxScanner):
        assert scanner.scan_all(parse_document("print 1;")) == []

    def test_grouped_and_sorted(self, scanner: SyntaxScanner):
        doc = parse_document("use warnings;\nour $x = qr/a/;\nuse mro;\n")
        assert scanner.scan_all(doc) == [
            VersionMarker(version=v("5.010"), rules=("use_mro",)),
            VersionMarker(version=v("5.006"), rules=("any_our_variables", "perl_5006_pragmas")),
            VersionMarker(version=v("5.005"), rules=("any_quotelike_regexp",)),
        ]

    def test_first_marker_agrees_with_scan_first(self, scanner: SyntaxScanner):
        doc = parse_document("use base 'Exporter';\nsub f : lvalue { 1 }\n")
        markers = scanner.scan_all(doc)
        assert isinstance(markers, list)
        assert scanner.scan_first(doc) == Found(markers[0].version)

    def test_malformed_document(self, scanner: SyntaxScanner):
        doc = Document(children=("bad",))  # type: ignore[arg-type]
        assert isinstance(scanner.scan_all(doc), ScanError)
