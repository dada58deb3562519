"""Exception hierarchy for perlminver."""

from __future__ import annotations


class PerlMinVerError(Exception):
    """Base class for all perlminver errors."""


class DocumentError(PerlMinVerError):
    """The input cannot be turned into a usable document."""


class ParseError(DocumentError):
    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class TraversalError(DocumentError):
    """A document tree is malformed and cannot be walked."""


class RegistryError(PerlMinVerError):
    """Invalid rule registration or lookup."""
