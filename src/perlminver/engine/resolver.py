"""Combine explicit declarations and syntax evidence into one minimum version."""

from __future__ import annotations

import logging
from functools import cache

from perlminver.document.loader import DocumentSource, load_document
from perlminver.document.nodes import Document
from perlminver.engine.explicit import find_explicit_version
from perlminver.engine.models import VersionMarker
from perlminver.engine.registry import RuleRegistry
from perlminver.engine.rules import default_registry
from perlminver.engine.scanner import SyntaxScanner
from perlminver.errors import DocumentError
from perlminver.version import (
    ABSOLUTE_FLOOR,
    Found,
    NotFound,
    PerlVersion,
    ScanError,
    ScanResult,
    max_version,
)

logger = logging.getLogger(__name__)

# Pseudo-rule name under which explicit declarations appear in markers
EXPLICIT_MARKER = "explicit_version"


class VersionResolver:
    """Owns a rule registry and answers version queries for documents.

    Every query accepts a :class:`Document`, a ``Path``, source text or bytes.
    Input that cannot be loaded yields ``ScanError``; it is never reported as
    "no constraint".
    """

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        *,
        default_floor: PerlVersion = ABSOLUTE_FLOOR,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self.default_floor = default_floor
        self._scanner = SyntaxScanner(self.registry)

    def minimum_version(self, source: DocumentSource) -> Found | ScanError:
        document = self._load(source)
        if isinstance(document, ScanError):
            return document

        explicit = find_explicit_version(document)
        if isinstance(explicit, ScanError):
            return explicit

        # Rules at or below what we already know cannot change the answer
        known = max_version(self.default_floor, explicit)
        assert isinstance(known, Found)
        syntax = self._scanner.scan_first(document, known.version)
        if isinstance(syntax, ScanError):
            return syntax

        result = max_version(self.default_floor, explicit, syntax)
        assert isinstance(result, Found)
        return result

    def minimum_explicit_version(self, source: DocumentSource) -> ScanResult:
        document = self._load(source)
        if isinstance(document, ScanError):
            return document
        return find_explicit_version(document)

    def minimum_syntax_version(
        self,
        source: DocumentSource,
        limit: PerlVersion | None = None,
    ) -> ScanResult:
        document = self._load(source)
        if isinstance(document, ScanError):
            return document
        return self._scanner.scan_first(document, limit)

    def minimum_module_version(self, source: DocumentSource) -> ScanError:
        """Recursive dependency resolution across modules is not implemented."""
        return ScanError("module dependency resolution is not implemented")

    def version_markers(self, source: DocumentSource) -> list[VersionMarker] | ScanError:
        """Explain a result: which rules fired at which version, highest first."""
        document = self._load(source)
        if isinstance(document, ScanError):
            return document

        markers = self._scanner.scan_all(document)
        if isinstance(markers, ScanError):
            return markers
        explicit = find_explicit_version(document)
        if isinstance(explicit, ScanError):
            return explicit
        if isinstance(explicit, NotFound):
            return markers
        return _merge_marker(markers, explicit.version, EXPLICIT_MARKER)

    def _load(self, source: DocumentSource) -> Document | ScanError:
        try:
            return load_document(source)
        except DocumentError as e:
            logger.warning(f"Unusable input: {e}")
            return ScanError(str(e))


def _merge_marker(
    markers: list[VersionMarker], version: PerlVersion, name: str
) -> list[VersionMarker]:
    merged: list[VersionMarker] = []
    placed = False
    for marker in markers:
        if not placed and marker.version == version:
            merged.append(
                VersionMarker(version=version, rules=tuple(sorted((*marker.rules, name))))
            )
            placed = True
            continue
        if not placed and marker.version < version:
            merged.append(VersionMarker(version=version, rules=(name,)))
            placed = True
        merged.append(marker)
    if not placed:
        merged.append(VersionMarker(version=version, rules=(name,)))
    return merged


class MinimumVersion:
    """Version checker bound to one document.

    The constructor raises :class:`DocumentError` for unusable input; use
    :meth:`load` to get a ``ScanError`` instead.
    """

    def __init__(self, source: DocumentSource, resolver: VersionResolver | None = None) -> None:
        self._document = load_document(source)
        self._resolver = resolver if resolver is not None else default_resolver()

    @classmethod
    def load(
        cls, source: DocumentSource, resolver: VersionResolver | None = None
    ) -> MinimumVersion | ScanError:
        try:
            return cls(source, resolver)
        except DocumentError as e:
            return ScanError(str(e))

    @property
    def document(self) -> Document:
        return self._document

    def minimum_version(self) -> Found | ScanError:
        return self._resolver.minimum_version(self._document)

    def minimum_explicit_version(self) -> ScanResult:
        return self._resolver.minimum_explicit_version(self._document)

    def minimum_syntax_version(self, limit: PerlVersion | None = None) -> ScanResult:
        return self._resolver.minimum_syntax_version(self._document, limit)

    def minimum_module_version(self) -> ScanError:
        return self._resolver.minimum_module_version(self._document)

    def version_markers(self) -> list[VersionMarker] | ScanError:
        return self._resolver.version_markers(self._document)


@cache
def default_resolver() -> VersionResolver:
    return VersionResolver(default_registry())


def minimum_version(source: DocumentSource) -> Found | ScanError:
    return default_resolver().minimum_version(source)


def minimum_explicit_version(source: DocumentSource) -> ScanResult:
    return default_resolver().minimum_explicit_version(source)


def minimum_syntax_version(
    source: DocumentSource, limit: PerlVersion | None = None
) -> ScanResult:
    return default_resolver().minimum_syntax_version(source, limit)


def version_markers(source: DocumentSource) -> list[VersionMarker] | ScanError:
    return default_resolver().version_markers(source)
