"""Tests for engine/registry.py."""

from __future__ import annotations

import pytest

from perlminver.engine.models import Rule
from perlminver.engine.registry import RegistryBuilder, RuleRegistry
from perlminver.errors import RegistryError
from perlminver.version import PerlVersion


def always(document) -> bool:
    return True


def never(document) -> bool:
    return False


def rule(name: str, version: str) -> Rule:
    return Rule(name=name, threshold=PerlVersion.parse(version), predicate=always)


class TestRuleRegistry:
    def test_descending_threshold(self):
        registry = RuleRegistry([rule("low", "5.005"), rule("high", "5.010"), rule("mid", "5.008")])
        assert registry.names() == ["high", "mid", "low"]

    def test_ties_broken_by_name(self):
        registry = RuleRegistry([rule("zeta", "5.006"), rule("alpha", "5.006"), rule("mu", "5.006")])
        assert registry.names() == ["alpha", "mu", "zeta"]

    def test_order_independent_of_registration(self):
        rules = [rule("b", "5.006"), rule("a", "5.006"), rule("c", "5.008")]
        assert RuleRegistry(rules).names() == RuleRegistry(reversed(rules)).names()

    def test_duplicate_names_rejected(self):
        with pytest.raises(RegistryError, match="Duplicate"):
            RuleRegistry([rule("same", "5.006"), rule("same", "5.008")])

    def test_lookup(self):
        registry = RuleRegistry([rule("a", "5.006")])
        assert registry["a"].threshold == PerlVersion.parse("5.006")
        assert "a" in registry
        assert "b" not in registry

    def test_lookup_unknown(self):
        with pytest.raises(RegistryError, match="Unknown rule"):
            RuleRegistry()["missing"]

    def test_empty(self):
        registry = RuleRegistry()
        assert len(registry) == 0
        assert list(registry) == []

    def test_without(self):
        registry = RuleRegistry([rule("a", "5.006"), rule("b", "5.008")])
        smaller = registry.without(["b"])
        assert smaller.names() == ["a"]
        assert registry.names() == ["b", "a"]

    def test_without_unknown(self):
        registry = RuleRegistry([rule("a", "5.006")])
        with pytest.raises(RegistryError, match="nope"):
            registry.without(["nope"])


class TestRegistryBuilder:
    def test_register_chains(self):
        registry = (
            RegistryBuilder()
            .register("a", "5.006", always, "first")
            .register("b", PerlVersion.parse("5.008"), never)
            .build()
        )
        assert registry.names() == ["b", "a"]
        assert registry["a"].description == "first"

    def test_string_threshold_parsed(self):
        registry = RegistryBuilder().register("dotted", "v5.6.1", always).build()
        assert registry["dotted"].threshold == PerlVersion(major=5, minor=6, patch=1)

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            RegistryBuilder().register("bad", "five", always)

    def test_duplicate_detected_on_build(self):
        builder = RegistryBuilder().register("a", "5.006", always).register("a", "5.008", never)
        with pytest.raises(RegistryError):
            builder.build()
