"""Turn a path, source text or bytes into a :class:`Document`."""

from __future__ import annotations

import logging
from pathlib import Path

from perlminver.document.nodes import Document
from perlminver.document.parser import build_tree
from perlminver.errors import DocumentError

logger = logging.getLogger(__name__)

DocumentSource = Document | Path | str | bytes


def parse_document(text: str, source_name: str = "<string>") -> Document:
    """Parse Perl source text. Raises ParseError on malformed source."""
    if "\x00" in text:
        raise DocumentError(f"{source_name}: binary content is not Perl source")
    children = build_tree(text, source_name)
    logger.debug(f"Parsed {source_name}: {len(children)} top-level statements")
    return Document(children, source_name, line_count=text.count("\n") + 1)


def read_document(path: Path) -> Document:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise DocumentError(f"cannot read {path}: {e.strerror or e}") from e
    return parse_document(decode_source(raw, str(path)), str(path))


def load_document(source: DocumentSource) -> Document:
    """Accept a Document, a Path to a Perl file, source text or raw bytes."""
    match source:
        case Document():
            return source
        case Path():
            return read_document(source)
        case str():
            return parse_document(source)
        case bytes():
            return parse_document(decode_source(source, "<bytes>"))
        case _:
            raise DocumentError(f"not a document, path or source: {type(source).__name__}")


def decode_source(raw: bytes, name: str) -> str:
    """Decode Perl source bytes.

    Perl without ``use utf8`` reads source as bytes, so Latin-1 and other
    legacy encodings are valid input. Bytes that are not UTF-8 are kept as
    surrogate escapes and survive the round trip to the parser unchanged.
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.debug(f"{name}: not UTF-8 ({e.reason}), keeping raw bytes")
        return raw.decode("utf-8", errors="surrogateescape")
