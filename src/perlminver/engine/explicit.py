"""Find versions declared with ``use VERSION`` / ``require VERSION``."""

from __future__ import annotations

import logging

from perlminver.document.nodes import Document, Include
from perlminver.errors import DocumentError
from perlminver.version import PerlVersion, ScanError, ScanResult, max_version

logger = logging.getLogger(__name__)


def find_explicit_version(document: Document) -> ScanResult:
    """Highest version declared by a top-level ``use``/``require`` statement.

    Only statements directly under the document count: a ``require 5.008``
    inside a block may be conditional and does not bind the whole file.
    """
    versions: list[PerlVersion] = []
    try:
        for node in document.statements():
            match node:
                case Include(type="use" | "require", version=str() as literal):
                    versions.append(PerlVersion.parse(literal))
    except DocumentError as e:
        logger.warning(f"Explicit version scan failed for {document.source_name}: {e}")
        return ScanError(str(e))
    except ValueError as e:
        logger.warning(f"Unreadable version declaration in {document.source_name}: {e}")
        return ScanError(str(e))
    return max_version(*versions)
