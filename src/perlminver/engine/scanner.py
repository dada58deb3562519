"""Evaluate a rule registry against a document."""

from __future__ import annotations

import logging

from perlminver.document.nodes import Document
from perlminver.engine.models import VersionMarker
from perlminver.engine.registry import RuleRegistry
from perlminver.errors import DocumentError
from perlminver.version import (
    ABSOLUTE_FLOOR,
    NOT_FOUND,
    Found,
    PerlVersion,
    ScanError,
    ScanResult,
)

logger = logging.getLogger(__name__)


class SyntaxScanner:
    def __init__(self, registry: RuleRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    def scan_first(
        self,
        document: Document,
        limit: PerlVersion | None = None,
    ) -> ScanResult:
        """Return the threshold of the highest rule that matches.

        The registry is walked in descending order, so the first match is the
        answer. Rules at or below *limit* cannot raise a floor the caller
        already holds and are not evaluated.
        """
        floor = limit if limit is not None else ABSOLUTE_FLOOR
        try:
            for rule in self._registry:
                if rule.threshold <= floor:
                    logger.debug(f"{document.source_name}: stopping at {rule.name}, limit {floor}")
                    break
                if rule.predicate(document):
                    logger.debug(f"{document.source_name}: {rule.name} matched ({rule.threshold})")
                    return Found(rule.threshold)
        except DocumentError as e:
            logger.warning(f"Syntax scan failed for {document.source_name}: {e}")
            return ScanError(str(e))
        return NOT_FOUND

    def scan_all(self, document: Document) -> list[VersionMarker] | ScanError:
        """Evaluate every rule and group the matches by version, highest first."""
        groups: dict[PerlVersion, list[str]] = {}
        try:
            for rule in self._registry:
                if rule.predicate(document):
                    groups.setdefault(rule.threshold, []).append(rule.name)
        except DocumentError as e:
            logger.warning(f"Syntax scan failed for {document.source_name}: {e}")
            return ScanError(str(e))
        return [
            VersionMarker(version=version, rules=tuple(sorted(names)))
            for version, names in sorted(groups.items(), key=lambda item: item[0], reverse=True)
        ]
