"""Perl version values, the tri-state scan result and the max reducer."""

from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

_DOTTED_RE = re.compile(r"^v?\d+(?:\.\d+)*$")
_DECIMAL_RE = re.compile(r"^\d+(?:\.\d*)?$")


class PerlVersion(BaseModel):
    """A Perl release as a (major, minor, patch) triple.

    Perl spells versions two ways: decimal (``5.008001``) and dotted
    (``v5.8.1``). Both parse to the same value. ``str()`` gives the decimal
    form, which is what reports show and what :meth:`parse` accepts back.
    """

    model_config = ConfigDict(frozen=True)

    major: int = Field(ge=0)
    minor: int = Field(default=0, ge=0, le=999)
    patch: int = Field(default=0, ge=0, le=999)

    @classmethod
    def parse(cls, text: str) -> PerlVersion:
        """Parse a decimal (``5.006``, ``5.005_03``) or dotted (``v5.10.1``) version."""
        raw = text.strip().strip("'\"")
        if not raw:
            raise ValueError("empty version string")

        if raw.startswith("v") or raw.count(".") >= 2:
            if not _DOTTED_RE.match(raw):
                raise ValueError(f"invalid dotted version: {text!r}")
            parts = [int(p) for p in raw.lstrip("v").split(".")]
            if len(parts) > 3:
                raise ValueError(f"too many components in version: {text!r}")
            parts += [0] * (3 - len(parts))
            return cls(major=parts[0], minor=parts[1], patch=parts[2])

        # Underscores mark developer releases; they carry no numeric weight
        raw = raw.replace("_", "")
        if not _DECIMAL_RE.match(raw):
            raise ValueError(f"invalid decimal version: {text!r}")
        whole, _, fraction = raw.partition(".")
        if len(fraction) > 6:
            raise ValueError(f"too many digits in version: {text!r}")
        fraction = fraction.ljust(6, "0")
        return cls(major=int(whole), minor=int(fraction[:3]), patch=int(fraction[3:]))

    @property
    def normal(self) -> str:
        """Dotted form, e.g. ``v5.8.1``."""
        return f"v{self.major}.{self.minor}.{self.patch}"

    def _key(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor:03d}"
        if self.patch:
            text += f"{self.patch:03d}"
        return text

    def __repr__(self) -> str:
        return f"PerlVersion('{self}')"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PerlVersion):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, PerlVersion):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, PerlVersion):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, PerlVersion):
            return NotImplemented
        return self._key() >= other._key()


def compare(a: PerlVersion, b: PerlVersion) -> int:
    """Three-way comparison: -1, 0 or 1."""
    return (a > b) - (a < b)


# The oldest version the engine ever reports.
ABSOLUTE_FLOOR = PerlVersion(major=5, minor=4)


@dataclass(frozen=True)
class Found:
    version: PerlVersion

    def __str__(self) -> str:
        return str(self.version)


@dataclass(frozen=True)
class NotFound:
    """A successful query that found no evidence."""

    def __str__(self) -> str:
        return "-"


@dataclass(frozen=True)
class ScanError:
    """The input could not be examined. Never the same as :class:`NotFound`."""

    reason: str

    def __str__(self) -> str:
        return "unknown"


NOT_FOUND = NotFound()

# Outcome of a version query that may find nothing or fail.
ScanResult = Found | NotFound | ScanError


def max_version(*values: PerlVersion | Found | NotFound | None) -> Found | NotFound:
    """Return the highest version among *values*, skipping absent entries.

    ``None`` and ``NotFound`` are skipped. If nothing usable remains the
    result is ``NOT_FOUND``. Passing a ``ScanError`` is a caller bug: an
    error must be handled, not reduced away.
    """
    best: PerlVersion | None = None
    for value in values:
        match value:
            case None | NotFound():
                continue
            case Found(version=candidate):
                pass
            case PerlVersion():
                candidate = value
            case ScanError(reason=reason):
                raise TypeError(f"cannot reduce an error result: {reason}")
            case _:
                raise TypeError(f"not a version value: {value!r}")
        if best is None or candidate > best:
            best = candidate
    return NOT_FOUND if best is None else Found(best)
