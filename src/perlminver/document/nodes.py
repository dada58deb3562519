"""Node variants of a parsed Perl document.

The set of node classes is closed: every tree is built from the classes
below, so rule predicates can ``match`` on them exhaustively. Nodes are
frozen; nothing in the engine mutates a document once it is built.
Only significant content is kept (no whitespace, comments or POD).
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum

from perlminver.errors import TraversalError


class NodeKind(StrEnum):
    WORD = "word"
    SYMBOL = "symbol"
    MAGIC = "magic"
    CAST = "cast"
    NUMBER = "number"
    QUOTE = "quote"
    QUOTE_LIKE = "quote_like"
    REGEXP = "regexp"
    OPERATOR = "operator"
    ATTRIBUTE = "attribute"
    PROTOTYPE = "prototype"
    HEREDOC = "heredoc"
    STRUCTURE = "structure"
    STATEMENT = "statement"
    INCLUDE = "include"
    VARIABLE = "variable"
    SUB = "sub"
    SCHEDULED = "scheduled"
    PACKAGE = "package"
    COMPOUND = "compound"
    DOCUMENT = "document"


class NumberType(StrEnum):
    DECIMAL = "decimal"
    FLOAT = "float"
    EXP = "exp"
    BINARY = "binary"
    OCTAL = "octal"
    HEX = "hex"
    VERSION = "version"


class QuoteLikeType(StrEnum):
    WORDS = "words"  # qw//
    COMMAND = "command"  # qx// and backticks
    REGEXP = "regexp"  # qr//
    READLINE = "readline"  # <FH>


class RegexpType(StrEnum):
    MATCH = "match"
    SUBSTITUTE = "substitute"
    TRANSLITERATE = "transliterate"


# --- Tokens ---


@dataclass(frozen=True, slots=True)
class Word:
    content: str
    line: int

    kind = NodeKind.WORD


@dataclass(frozen=True, slots=True)
class Symbol:
    """A named variable: ``$x``, ``@list``, ``%hash``, ``&sub``, ``*glob``."""

    content: str
    line: int

    kind = NodeKind.SYMBOL


@dataclass(frozen=True, slots=True)
class Magic:
    """A punctuation or special variable such as ``$^V``, ``$!`` or ``@_``."""

    content: str
    line: int

    kind = NodeKind.MAGIC


@dataclass(frozen=True, slots=True)
class Cast:
    content: str
    line: int

    kind = NodeKind.CAST


@dataclass(frozen=True, slots=True)
class Number:
    content: str
    line: int
    subtype: NumberType

    kind = NodeKind.NUMBER


@dataclass(frozen=True, slots=True)
class Quote:
    content: str
    line: int
    interpolate: bool

    kind = NodeKind.QUOTE


@dataclass(frozen=True, slots=True)
class QuoteLike:
    content: str
    line: int
    subtype: QuoteLikeType

    kind = NodeKind.QUOTE_LIKE


@dataclass(frozen=True, slots=True)
class Regexp:
    content: str
    line: int
    subtype: RegexpType

    kind = NodeKind.REGEXP


@dataclass(frozen=True, slots=True)
class Operator:
    content: str
    line: int

    kind = NodeKind.OPERATOR


@dataclass(frozen=True, slots=True)
class Attribute:
    """A subroutine attribute, e.g. ``lvalue`` or ``Local(foo)``."""

    content: str
    line: int

    kind = NodeKind.ATTRIBUTE

    @property
    def name(self) -> str:
        return self.content.split("(", 1)[0]


@dataclass(frozen=True, slots=True)
class Prototype:
    content: str
    line: int

    kind = NodeKind.PROTOTYPE


@dataclass(frozen=True, slots=True)
class HereDoc:
    content: str
    line: int

    kind = NodeKind.HEREDOC


Token = (
    Word
    | Symbol
    | Magic
    | Cast
    | Number
    | Quote
    | QuoteLike
    | Regexp
    | Operator
    | Attribute
    | Prototype
    | HereDoc
)


# --- Containers ---


def _join(children: tuple[Node, ...]) -> str:
    return " ".join(child.content for child in children)


@dataclass(frozen=True, slots=True)
class Structure:
    """A bracketed region: block ``{}``, list ``()`` or subscript ``[]``."""

    brace: str
    children: tuple[Node, ...]
    line: int

    kind = NodeKind.STRUCTURE

    @property
    def content(self) -> str:
        closing = {"{": "}", "(": ")", "[": "]"}[self.brace]
        return f"{self.brace} {_join(self.children)} {closing}"


@dataclass(frozen=True, slots=True)
class Statement:
    children: tuple[Node, ...]
    line: int

    kind = NodeKind.STATEMENT

    @property
    def content(self) -> str:
        return _join(self.children)


@dataclass(frozen=True, slots=True)
class Include:
    """``use``, ``no`` or ``require`` statement."""

    children: tuple[Node, ...]
    line: int
    type: str
    module: str | None = None
    version: str | None = None

    kind = NodeKind.INCLUDE

    @property
    def content(self) -> str:
        return _join(self.children)

    @property
    def pragma(self) -> str | None:
        """The module name when it names a pragma (all lowercase)."""
        if self.module and self.module[0].islower() and self.module.isalnum():
            return self.module
        return None


@dataclass(frozen=True, slots=True)
class Variable:
    """A declaration statement introduced by ``my``, ``our``, ``local`` or ``state``."""

    children: tuple[Node, ...]
    line: int
    type: str

    kind = NodeKind.VARIABLE

    @property
    def content(self) -> str:
        return _join(self.children)


@dataclass(frozen=True, slots=True)
class SubDeclaration:
    children: tuple[Node, ...]
    line: int
    name: str
    attributes: tuple[str, ...] = ()
    prototype: str | None = None

    kind = NodeKind.SUB

    @property
    def content(self) -> str:
        return _join(self.children)


@dataclass(frozen=True, slots=True)
class ScheduledBlock:
    """``BEGIN``, ``INIT``, ``CHECK``, ``UNITCHECK`` or ``END`` block."""

    children: tuple[Node, ...]
    line: int
    type: str

    kind = NodeKind.SCHEDULED

    @property
    def content(self) -> str:
        return _join(self.children)


@dataclass(frozen=True, slots=True)
class Package:
    children: tuple[Node, ...]
    line: int
    namespace: str

    kind = NodeKind.PACKAGE

    @property
    def content(self) -> str:
        return _join(self.children)


@dataclass(frozen=True, slots=True)
class Compound:
    """Block-terminated control structure (``if``, ``while``, ``for``, bare block)."""

    children: tuple[Node, ...]
    line: int
    type: str

    kind = NodeKind.COMPOUND

    @property
    def content(self) -> str:
        return _join(self.children)


StatementNode = Statement | Include | Variable | SubDeclaration | ScheduledBlock | Package | Compound
Container = Structure | StatementNode
Node = Token | Container

_NODE_TYPES = (
    Word,
    Symbol,
    Magic,
    Cast,
    Number,
    Quote,
    QuoteLike,
    Regexp,
    Operator,
    Attribute,
    Prototype,
    HereDoc,
    Structure,
    Statement,
    Include,
    Variable,
    SubDeclaration,
    ScheduledBlock,
    Package,
    Compound,
)


def children_of(node: Node) -> tuple[Node, ...]:
    match node:
        case (
            Structure()
            | Statement()
            | Include()
            | Variable()
            | SubDeclaration()
            | ScheduledBlock()
            | Package()
            | Compound()
        ):
            return node.children
        case _:
            return ()


@dataclass(frozen=True)
class Document:
    """Root of a parsed Perl source file."""

    children: tuple[Node, ...]
    source_name: str = "<string>"
    line_count: int = field(default=0, compare=False)

    kind = NodeKind.DOCUMENT

    @property
    def content(self) -> str:
        return _join(self.children)

    def walk(self) -> Iterator[Node]:
        """Yield every node below the document, depth first, in source order."""
        stack: list[object] = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if not isinstance(node, _NODE_TYPES):
                raise TraversalError(
                    f"{self.source_name}: unexpected {type(node).__name__} in document tree"
                )
            yield node
            stack.extend(reversed(children_of(node)))

    def exists(self, predicate: Callable[[Node], bool]) -> bool:
        """True if some node satisfies *predicate*. Stops at the first match."""
        return any(predicate(node) for node in self.walk())

    def find(self, predicate: Callable[[Node], bool]) -> list[Node]:
        return [node for node in self.walk() if predicate(node)]

    def statements(self) -> tuple[Node, ...]:
        """Top-level statements, validated."""
        for node in self.children:
            if not isinstance(node, _NODE_TYPES):
                raise TraversalError(
                    f"{self.source_name}: unexpected {type(node).__name__} at top level"
                )
        return self.children
