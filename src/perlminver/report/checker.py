"""Per-file checks and cross-file aggregation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from perlminver.document.loader import read_document
from perlminver.engine.resolver import VersionResolver
from perlminver.errors import DocumentError
from perlminver.report.models import BatchReport, FileReport, MarkerReport
from perlminver.version import Found, PerlVersion, ScanError, max_version

logger = logging.getLogger(__name__)


def check_file(
    path: Path,
    resolver: VersionResolver,
    *,
    explain: bool = False,
    limit: PerlVersion | None = None,
) -> FileReport:
    """Run every query for one file. Failures are recorded, not raised.

    With *limit*, the syntax column only reports evidence above that version.
    """
    try:
        document = read_document(path)
    except DocumentError as e:
        logger.warning(f"Skipping {path}: {e}")
        return FileReport(path=str(path), error=str(e))

    minimum = resolver.minimum_version(document)
    explicit = resolver.minimum_explicit_version(document)
    syntax = resolver.minimum_syntax_version(document, limit)
    for result in (minimum, explicit, syntax):
        if isinstance(result, ScanError):
            return FileReport(path=str(path), error=result.reason)

    report = FileReport(
        path=str(path),
        minimum=str(minimum),
        explicit=str(explicit.version) if isinstance(explicit, Found) else None,
        syntax=str(syntax.version) if isinstance(syntax, Found) else None,
        inconsistent=(
            isinstance(explicit, Found)
            and isinstance(syntax, Found)
            and explicit.version < syntax.version
        ),
    )
    if explain:
        markers = resolver.version_markers(document)
        if isinstance(markers, ScanError):
            return FileReport(path=str(path), error=markers.reason)
        report.markers = [
            MarkerReport(version=str(marker.version), rules=list(marker.rules))
            for marker in markers
        ]
    return report


def aggregate(reports: Iterable[FileReport]) -> BatchReport:
    """Combine file reports: overall minimum is the max over successful files."""
    files = list(reports)
    versions = [PerlVersion.parse(r.minimum) for r in files if r.ok and r.minimum is not None]
    overall = max_version(*versions)
    return BatchReport(
        files=files,
        minimum=str(overall.version) if isinstance(overall, Found) else None,
        inconsistent=[r.path for r in files if r.inconsistent],
        errors=sum(1 for r in files if not r.ok),
    )
