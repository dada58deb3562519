"""Build the document tree from a tree-sitter parse of Perl source.

tree-sitter's Perl grammar decides the context-sensitive parts of Perl
(regexp versus division, heredoc bodies, quote-like delimiters, prototypes
versus signatures). This module flattens its concrete syntax tree into the
closed node set of :mod:`perlminver.document.nodes`: statements made of
tokens, with every bracketed region collected into a ``Structure``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from functools import cache

try:
    from tree_sitter import Node as TSNode
    from tree_sitter import Parser
    from tree_sitter_language_pack import get_language
except ImportError as e:
    raise ImportError(
        "tree-sitter-language-pack is required. "
        "Install with: pip install tree-sitter tree-sitter-language-pack"
    ) from e

from perlminver.document.nodes import (
    Attribute,
    Cast,
    Compound,
    HereDoc,
    Include,
    Magic,
    Node,
    Number,
    NumberType,
    Operator,
    Package,
    Prototype,
    Quote,
    QuoteLike,
    QuoteLikeType,
    Regexp,
    RegexpType,
    ScheduledBlock,
    Statement,
    StatementNode,
    Structure,
    SubDeclaration,
    Symbol,
    Variable,
    Word,
)
from perlminver.errors import ParseError

logger = logging.getLogger(__name__)

# Everything after a line starting with __END__ or __DATA__ is data.
_END_RE = re.compile(r"^__(?:END|DATA)__\b", re.MULTILINE)

_IDENT_RE = re.compile(r"[A-Za-z_]\w*(?:::\w+)*(?:::)?|::\w+(?:::\w+)*")
_V_STRING_RE = re.compile(r"v\d+(?:\.\d+)*")
_NUMBER_FORMS = (
    (re.compile(r"v\d+(?:\.\d+)*|\d+\.\d+\.\d+(?:\.\d+)*"), NumberType.VERSION),
    (re.compile(r"0[bB][01_]+"), NumberType.BINARY),
    (re.compile(r"0[xX][0-9a-fA-F_]+"), NumberType.HEX),
    (re.compile(r"\d[\d_]*[eE][+-]?\d+"), NumberType.EXP),
    (
        re.compile(r"(?:\d[\d_]*)?\.\d[\d_]*(?:[eE][+-]?\d+)?|\d[\d_]*\.(?:[eE][+-]?\d+)?"),
        NumberType.FLOAT,
    ),
    (re.compile(r"0[0-7_]+"), NumberType.OCTAL),
)

_SKIPPED_TYPES = frozenset({"comment", "pod", "__END__", "__DATA__", "data_section"})
_OPENERS = {"{": "}", "(": ")", "[": "]"}
_CAST_OPENERS = {"${": "$", "@{": "@", "%{": "%", "&{": "&", "*{": "*", "$#{": "$#"}
_SIGILS = frozenset({"$", "@", "$#"})
_CAST_SIGILS = frozenset({"$", "@", "%", "&", "*", "$#"})

_QUOTE_TYPES = {"string_literal": False, "interpolated_string_literal": True}
_QUOTE_LIKE_TYPES = {
    "quoted_word_list": QuoteLikeType.WORDS,
    "command_string": QuoteLikeType.COMMAND,
    "quoted_regexp": QuoteLikeType.REGEXP,
}
_REGEXP_TYPES = {
    "match_regexp": RegexpType.MATCH,
    "substitution_regexp": RegexpType.SUBSTITUTE,
    "transliteration_expression": RegexpType.TRANSLITERATE,
}
_NUMBER_TYPES = frozenset({"number", "version"})
_WORD_TYPES = frozenset(
    {"bareword", "package", "function", "method", "autoquoted_bareword", "identifier"}
)
_PROTOTYPE_TYPES = frozenset({"prototype", "signature", "prototype_or_signature"})
_VARIABLE_TYPES = frozenset(
    {
        "scalar",
        "array",
        "hash",
        "glob",
        "arraylen",
        "container_variable",
        "slice_container_variable",
        "keyval_container_variable",
    }
)

_INCLUDE_WORDS = frozenset({"use", "no", "require"})
_VARIABLE_WORDS = frozenset({"my", "our", "local", "state"})
_SCHEDULED_WORDS = frozenset({"BEGIN", "INIT", "CHECK", "UNITCHECK", "END"})
_COMPOUND_WORDS = frozenset({"if", "unless", "while", "until", "for", "foreach"})
_VERSION_NUMBERS = frozenset({NumberType.DECIMAL, NumberType.FLOAT, NumberType.VERSION})


@cache
def perl_parser() -> Parser:
    """The shared tree-sitter parser for Perl 5."""
    parser = Parser(get_language("perl"))
    logger.debug("Loaded perl parser")
    return parser


def number_type(text: str) -> NumberType:
    for pattern, subtype in _NUMBER_FORMS:
        if pattern.fullmatch(text):
            return subtype
    return NumberType.DECIMAL


def _is_skipped(kind: str) -> bool:
    if kind in _SKIPPED_TYPES:
        return True
    # heredoc bodies and terminators; the <<MARKER itself is kept
    return "heredoc" in kind and any(part in kind for part in ("content", "body", "end"))


def _is_statement(node: TSNode) -> bool:
    return node.is_named and node.type.endswith("_statement")


class TreeConverter:
    """Convert one tree-sitter syntax tree into document nodes."""

    def __init__(self, source: bytes, source_name: str = "<string>") -> None:
        self._source = source
        self._source_name = source_name

    def convert(self, root: TSNode) -> tuple[Node, ...]:
        if root.has_error:
            self._raise_error(root)
        return self._statements(root.children)

    # --- Errors ---

    def _raise_error(self, root: TSNode) -> None:
        node = _first_error(root) or root
        line = node.start_point[0] + 1
        if node.is_missing:
            raise ParseError(f"{self._source_name}: missing {node.type!r}", line)
        snippet = self._text(node).strip().splitlines()
        near = f" near {snippet[0][:40]!r}" if snippet else ""
        raise ParseError(f"{self._source_name}: syntax error{near}", line)

    # --- Statements ---

    def _statements(self, nodes: Sequence[TSNode]) -> tuple[Node, ...]:
        statements: list[Node] = []
        pending: list[TSNode] = []

        def flush() -> None:
            if pending:
                statement = self._statement(pending)
                if statement is not None:
                    statements.append(statement)
                pending.clear()

        for node in nodes:
            if _is_skipped(node.type):
                continue
            if node.type == ";":
                flush()
                continue
            if node.type == "statement_label":
                node = _labelled(node)
            if _is_statement(node):
                flush()
                statement = self._statement(node.children, fallback=node)
                if statement is not None:
                    statements.append(statement)
                continue
            pending.append(node)
        flush()
        return tuple(statements)

    def _statement(
        self, nodes: Sequence[TSNode], fallback: TSNode | None = None
    ) -> StatementNode | None:
        children = tuple(self._flatten(nodes))
        if not children:
            return None
        anchor = nodes[0] if nodes else fallback
        line = anchor.start_point[0] + 1 if anchor is not None else children[0].line
        return classify(children, line)

    # --- Tokens and structures ---

    def _flatten(self, nodes: Sequence[TSNode], sigil_context: bool = False) -> list[Node]:
        result: list[Node] = []
        index = 0
        while index < len(nodes):
            node = nodes[index]
            kind = node.type
            if _is_skipped(kind) or kind == ";":
                index += 1
                continue
            if kind in _OPENERS or kind in _CAST_OPENERS:
                closer = _closer_index(nodes, index)
                if closer is not None:
                    result.extend(self._structure(node, nodes[index + 1 : closer]))
                    index = closer + 1
                    continue
            result.extend(self._convert(node, sigil_context))
            index += 1
        return result

    def _structure(self, opener: TSNode, inner: Sequence[TSNode]) -> list[Node]:
        line = opener.start_point[0] + 1
        kind = opener.type
        significant = [node for node in inner if not _is_skipped(node.type)]
        if kind == "(" and len(significant) == 1 and significant[0].type in _PROTOTYPE_TYPES:
            return [Prototype(f"({self._text(significant[0])})", line)]
        nodes: list[Node] = []
        if kind in _CAST_OPENERS:
            nodes.append(Cast(_CAST_OPENERS[kind], line))
        nodes.append(Structure(kind[-1], self._statements(inner), line))
        return nodes

    def _convert(self, node: TSNode, sigil_context: bool) -> list[Node]:
        kind = node.type
        line = node.start_point[0] + 1
        if _is_statement(node):
            statement = self._statement(node.children, fallback=node)
            return [statement] if statement is not None else []
        if kind in _QUOTE_TYPES:
            return [Quote(self._text(node), line, interpolate=_QUOTE_TYPES[kind])]
        if kind in _QUOTE_LIKE_TYPES:
            return [QuoteLike(self._text(node), line, _QUOTE_LIKE_TYPES[kind])]
        if "readline" in kind:
            return [QuoteLike(self._text(node), line, QuoteLikeType.READLINE)]
        if kind in _REGEXP_TYPES:
            return [Regexp(self._text(node), line, _REGEXP_TYPES[kind])]
        if "transliteration" in kind:
            return [Regexp(self._text(node), line, RegexpType.TRANSLITERATE)]
        if "substitution" in kind:
            return [Regexp(self._text(node), line, RegexpType.SUBSTITUTE)]
        if "regexp" in kind:
            return [Regexp(self._text(node), line, RegexpType.MATCH)]
        if "string" in kind:
            return [Quote(self._text(node), line, interpolate="interpolated" in kind)]
        if "heredoc" in kind:
            return [HereDoc(self._text(node), line)]
        if kind in _NUMBER_TYPES:
            text = self._text(node)
            return [Number(text, line, number_type(text))]
        if kind == "attribute":
            return [Attribute(self._text(node), line)]
        if kind in _PROTOTYPE_TYPES:
            text = self._text(node)
            return [Prototype(text if text.startswith("(") else f"({text})", line)]
        if kind in _VARIABLE_TYPES:
            return self._variable(node)
        if kind in _WORD_TYPES:
            return [_word(self._text(node), line)]
        if node.child_count == 0:
            return self._leaf(node, sigil_context)
        return self._flatten(node.children)

    def _variable(self, node: TSNode) -> list[Node]:
        text = self._text(node)
        line = node.start_point[0] + 1
        if text.startswith("${^"):
            return [Magic(text, line)]
        if any(
            child.type == "block" or child.type in _OPENERS or child.type in _VARIABLE_TYPES
            for child in node.children
        ):
            return self._flatten(node.children, sigil_context=True)
        sigil = "$#" if text.startswith("$#") and len(text) > 2 else text[:1]
        name = text[len(sigil) :].strip()
        if _IDENT_RE.fullmatch(name) and name != "_":
            return [Symbol(sigil + name, line)]
        return [Magic(text, line)]

    def _leaf(self, node: TSNode, sigil_context: bool) -> list[Node]:
        text = self._text(node).strip()
        line = node.start_point[0] + 1
        if not text:
            return []
        if text in _SIGILS or (sigil_context and text in _CAST_SIGILS):
            return [Cast(text, line)]
        if _IDENT_RE.fullmatch(text):
            return [_word(text, line)]
        if text[0].isdigit():
            return [Number(text, line, number_type(text))]
        return [Operator(text, line)]

    def _text(self, node: TSNode) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8", "surrogateescape")


def _word(text: str, line: int) -> Word | Number:
    if _V_STRING_RE.fullmatch(text):
        return Number(text, line, NumberType.VERSION)
    return Word(text, line)


def _labelled(node: TSNode) -> TSNode:
    """The statement a ``LABEL:`` prefixes."""
    for child in reversed(node.children):
        if _is_statement(child):
            return child
    return node


def _closer_index(nodes: Sequence[TSNode], start: int) -> int | None:
    closer = _OPENERS.get(nodes[start].type) or "}"
    depth = 0
    for index in range(start, len(nodes)):
        kind = nodes[index].type
        opens = kind in _OPENERS and _OPENERS[kind] == closer
        if opens or (kind in _CAST_OPENERS and closer == "}"):
            depth += 1
        elif kind == closer:
            depth -= 1
            if depth == 0:
                return index
    return None


def _first_error(node: TSNode) -> TSNode | None:
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def classify(children: tuple[Node, ...], line: int) -> StatementNode:
    """Pick the statement variant for a run of flattened children."""
    first = children[0] if children else None
    second = children[1] if len(children) > 1 else None
    if not isinstance(first, Word):
        if isinstance(first, Structure) and first.brace == "{" and len(children) == 1:
            return Compound(children, line, type="block")
        return Statement(children, line)

    word = first.content
    if word in _INCLUDE_WORDS:
        module: str | None = None
        version: str | None = None
        if isinstance(second, Number) and second.subtype in _VERSION_NUMBERS:
            version = second.content
        elif isinstance(second, Word):
            module = second.content
        return Include(children, line, type=word, module=module, version=version)
    if word in _VARIABLE_WORDS:
        return Variable(children, line, type=word)
    if word == "sub" and isinstance(second, Word):
        attributes = tuple(c.name for c in children if isinstance(c, Attribute))
        prototype = next((c.content for c in children if isinstance(c, Prototype)), None)
        return SubDeclaration(
            children, line, name=second.content, attributes=attributes, prototype=prototype
        )
    if word in _SCHEDULED_WORDS and isinstance(second, Structure) and second.brace == "{":
        return ScheduledBlock(children, line, type=word)
    if word == "package" and isinstance(second, Word):
        return Package(children, line, namespace=second.content)
    if word in _COMPOUND_WORDS:
        return Compound(children, line, type=word)
    return Statement(children, line)


def build_tree(source: str, source_name: str = "<string>") -> tuple[Node, ...]:
    """Parse *source* and return its top-level statements.

    Raises ParseError when tree-sitter reports a syntax error.
    """
    end = _END_RE.search(source)
    if end is not None:
        source = source[: end.start()]
    data = source.encode("utf-8", "surrogateescape")
    tree = perl_parser().parse(data)
    return TreeConverter(data, source_name).convert(tree.root_node)
