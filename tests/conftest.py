"""Shared fixtures for perlminver tests."""

from pathlib import Path

import pytest


def _write(path: Path, source: str) -> Path:
    """Write Perl source to *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source)
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PERLMINVER_DEFAULT_FLOOR", raising=False)
    monkeypatch.delenv("PERLMINVER_DISABLED_RULES", raising=False)


@pytest.fixture
def plain_script(tmp_path: Path) -> Path:
    """Script with nothing newer than 5.004."""
    return _write(tmp_path / "hello.pl", 'print "Hello, World!\\n";\n')


@pytest.fixture
def our_module(tmp_path: Path) -> Path:
    """Module declaring a package variable (5.006)."""
    return _write(
        tmp_path / "lib" / "Foo.pm",
        "package Foo;\n\nour $VERSION = '1.00';\n\n1;\n",
    )


@pytest.fixture
def inconsistent_module(tmp_path: Path) -> Path:
    """Declares 5.005 but uses a 5.006 subroutine attribute."""
    return _write(
        tmp_path / "lib" / "Bar.pm",
        "package Bar;\nrequire 5.005;\n\nsub name : lvalue { $Bar::name }\n\n1;\n",
    )


@pytest.fixture
def perl_tree(tmp_path: Path, plain_script: Path, our_module: Path) -> Path:
    """Directory with two Perl files, a README and a .git dir to skip."""
    _write(tmp_path / "README.md", "# not perl\n")
    _write(tmp_path / ".git" / "hooks" / "x.pl", "use mro;\n")
    return tmp_path
