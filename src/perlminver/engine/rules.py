"""The default ruleset: syntactic features and the Perl release that introduced them.

Each check is a small predicate over a document. To add one, write the
predicate and add a row to ``_DEFAULT_RULES``. Rules sharing a threshold are
ordered by name.
"""

from __future__ import annotations

from functools import cache

from perlminver.document.nodes import (
    Attribute,
    Cast,
    Document,
    Include,
    Magic,
    Node,
    Number,
    NumberType,
    Quote,
    QuoteLike,
    QuoteLikeType,
    ScheduledBlock,
    Statement,
    Structure,
    SubDeclaration,
    Variable,
)
from perlminver.engine.models import Predicate
from perlminver.engine.registry import RegistryBuilder, RuleRegistry
from perlminver.version import PerlVersion

PERL_5_010 = PerlVersion.parse("5.010")
PERL_5_008 = PerlVersion.parse("5.008")
PERL_5_006_001 = PerlVersion.parse("5.6.1")
PERL_5_006 = PerlVersion.parse("5.006")
PERL_5_005 = PerlVersion.parse("5.005")
PERL_5_004_005 = PerlVersion.parse("5.4.5")

_PERL_5006_PRAGMAS = frozenset({"warnings", "attributes", "open", "filetest"})
_PERL_5005_PRAGMAS = frozenset({"re", "fields", "attrs"})
_PERL_5005_MODULES = frozenset({"Tie::Array", "Errno", "Thread", "base"})


def _pragma_in(node: Node, pragmas: frozenset[str]) -> bool:
    match node:
        case Include() if node.pragma in pragmas:
            return True
    return False


def _magic(node: Node, name: str) -> bool:
    match node:
        case Magic(content=content):
            return content == name
    return False


# --- 5.010 ---


def use_mro(document: Document) -> bool:
    def check(node: Node) -> bool:
        match node:
            case Include(type="use", module="mro"):
                return True
        return False

    return document.exists(check)


# --- 5.008 ---


def local_soft_reference(document: Document) -> bool:
    """``local ${"name"}``: localising a symbolic scalar reference."""

    def check(node: Node) -> bool:
        match node:
            case Variable(
                type="local",
                children=(
                    _,
                    Cast(content="$"),
                    Structure(brace="{", children=(Statement(children=(Quote(), *_)), *_)),
                    *_,
                ),
            ):
                return True
        return False

    return document.exists(check)


def constant_hash(document: Document) -> bool:
    """``use constant { A => 1, B => 2 }``: several constants in one hash."""

    def check(node: Node) -> bool:
        match node:
            case Include(
                type="use", module="constant", children=(_, _, Structure(brace="{"), *_)
            ):
                return True
        return False

    return document.exists(check)


def pragma_utf8(document: Document) -> bool:
    # Shipped with 5.6 but unusable until 5.8
    return document.exists(lambda node: _pragma_in(node, frozenset({"utf8"})))


# --- 5.006001 ---


def any_version_literals(document: Document) -> bool:
    def check(node: Node) -> bool:
        match node:
            case Number(subtype=NumberType.VERSION):
                return True
        return False

    return document.exists(check)


# --- 5.006 ---


def any_our_variables(document: Document) -> bool:
    def check(node: Node) -> bool:
        match node:
            case Variable(type="our"):
                return True
        return False

    return document.exists(check)


def any_attributes(document: Document) -> bool:
    def check(node: Node) -> bool:
        match node:
            case Attribute():
                return True
        return False

    return document.exists(check)


def perl_5006_pragmas(document: Document) -> bool:
    return document.exists(lambda node: _pragma_in(node, _PERL_5006_PRAGMAS))


def any_binary_literals(document: Document) -> bool:
    def check(node: Node) -> bool:
        match node:
            case Number(subtype=NumberType.BINARY):
                return True
        return False

    return document.exists(check)


def magic_version(document: Document) -> bool:
    return document.exists(lambda node: _magic(node, "$^V"))


# --- 5.005 ---


def perl_5005_pragmas(document: Document) -> bool:
    return document.exists(lambda node: _pragma_in(node, _PERL_5005_PRAGMAS))


def perl_5005_modules(document: Document) -> bool:
    def check(node: Node) -> bool:
        match node:
            case Include(module=module) if module in _PERL_5005_MODULES:
                return True
        return False

    return document.exists(check)


def any_tied_arrays(document: Document) -> bool:
    def check(node: Node) -> bool:
        match node:
            case SubDeclaration(name="TIEARRAY"):
                return True
        return False

    return document.exists(check)


def any_quotelike_regexp(document: Document) -> bool:
    def check(node: Node) -> bool:
        match node:
            case QuoteLike(subtype=QuoteLikeType.REGEXP):
                return True
        return False

    return document.exists(check)


def any_INIT_blocks(document: Document) -> bool:  # noqa: N802
    def check(node: Node) -> bool:
        match node:
            case ScheduledBlock(type="INIT"):
                return True
        return False

    return document.exists(check)


# --- 5.004005 ---


def bugfix_magic_errno(document: Document) -> bool:
    """``$^E`` used together with ``$!``; their interaction was fixed in a point release."""
    return document.exists(lambda node: _magic(node, "$^E")) and document.exists(
        lambda node: _magic(node, "$!")
    )


_DEFAULT_RULES: tuple[tuple[str, PerlVersion, Predicate, str], ...] = (
    ("use_mro", PERL_5_010, use_mro, "use mro"),
    ("local_soft_reference", PERL_5_008, local_soft_reference, 'local ${"name"}'),
    ("constant_hash", PERL_5_008, constant_hash, "use constant { ... }"),
    ("pragma_utf8", PERL_5_008, pragma_utf8, "use utf8"),
    ("any_version_literals", PERL_5_006_001, any_version_literals, "v-string literals"),
    ("any_our_variables", PERL_5_006, any_our_variables, "our variables"),
    ("any_attributes", PERL_5_006, any_attributes, "subroutine attributes"),
    ("perl_5006_pragmas", PERL_5_006, perl_5006_pragmas, "warnings, open, filetest, attributes"),
    ("any_binary_literals", PERL_5_006, any_binary_literals, "0b binary literals"),
    ("magic_version", PERL_5_006, magic_version, "$^V"),
    ("perl_5005_pragmas", PERL_5_005, perl_5005_pragmas, "re, fields, attrs"),
    ("perl_5005_modules", PERL_5_005, perl_5005_modules, "Tie::Array, Errno, Thread, base"),
    ("any_tied_arrays", PERL_5_005, any_tied_arrays, "sub TIEARRAY"),
    ("any_quotelike_regexp", PERL_5_005, any_quotelike_regexp, "qr// literals"),
    ("any_INIT_blocks", PERL_5_005, any_INIT_blocks, "INIT blocks"),
    ("bugfix_magic_errno", PERL_5_004_005, bugfix_magic_errno, "$^E together with $!"),
)


@cache
def default_registry() -> RuleRegistry:
    builder = RegistryBuilder()
    for name, threshold, predicate, description in _DEFAULT_RULES:
        builder.register(name, threshold, predicate, description)
    return builder.build()
