"""Perl document model: node variants, tree-sitter conversion and loader."""

from perlminver.document.loader import DocumentSource, load_document, parse_document, read_document
from perlminver.document.nodes import (
    Attribute,
    Cast,
    Compound,
    Document,
    HereDoc,
    Include,
    Magic,
    Node,
    NodeKind,
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
    Structure,
    SubDeclaration,
    Symbol,
    Variable,
    Word,
)

__all__ = [
    "Attribute",
    "Cast",
    "Compound",
    "Document",
    "DocumentSource",
    "HereDoc",
    "Include",
    "Magic",
    "Node",
    "NodeKind",
    "Number",
    "NumberType",
    "Operator",
    "Package",
    "Prototype",
    "Quote",
    "QuoteLike",
    "QuoteLikeType",
    "Regexp",
    "RegexpType",
    "ScheduledBlock",
    "Statement",
    "Structure",
    "SubDeclaration",
    "Symbol",
    "Variable",
    "Word",
    "load_document",
    "parse_document",
    "read_document",
]
