"""perlminver: find the minimum Perl version required to run a piece of code."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("perlminver")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from perlminver.document import Document, load_document  # noqa: E402
from perlminver.engine import (  # noqa: E402
    MinimumVersion,
    VersionResolver,
    default_registry,
    minimum_explicit_version,
    minimum_syntax_version,
    minimum_version,
    version_markers,
)
from perlminver.errors import DocumentError, ParseError, PerlMinVerError  # noqa: E402
from perlminver.version import (  # noqa: E402
    NOT_FOUND,
    Found,
    NotFound,
    PerlVersion,
    ScanError,
    ScanResult,
    max_version,
)

__all__ = [
    "NOT_FOUND",
    "Document",
    "DocumentError",
    "Found",
    "MinimumVersion",
    "NotFound",
    "ParseError",
    "PerlMinVerError",
    "PerlVersion",
    "ScanError",
    "ScanResult",
    "VersionResolver",
    "__version__",
    "default_registry",
    "load_document",
    "max_version",
    "minimum_explicit_version",
    "minimum_syntax_version",
    "minimum_version",
    "version_markers",
]
