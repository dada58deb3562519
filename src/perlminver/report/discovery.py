"""Find Perl source files under a set of paths."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

_SKIP_DIRS: frozenset[str] = frozenset({
    ".git",
    ".hg",
    ".svn",
    "_build",
    "blib",
    "node_modules",
    "local",
})


def is_perl_file(path: Path, extensions: Iterable[str]) -> bool:
    if path.suffix in set(extensions):
        return True
    if path.suffix:
        return False
    try:
        with path.open("rb") as f:
            first = f.readline(256)
    except OSError:
        return False
    return first.startswith(b"#!") and b"perl" in first


def discover_files(paths: Iterable[Path], extensions: Iterable[str]) -> Iterator[Path]:
    """Yield Perl files. Directories are walked in sorted order; files are yielded as given.

    Paths that do not exist are passed through so the caller reports them.
    """
    extensions = list(extensions)
    for path in paths:
        if not path.is_dir():
            yield path
            continue
        for dirpath, dirnames, filenames in os.walk(path):
            dirnames[:] = sorted(d for d in dirnames if d not in _SKIP_DIRS)
            for fname in sorted(filenames):
                full_path = Path(dirpath) / fname
                if is_perl_file(full_path, extensions):
                    yield full_path
