"""Rule and marker models for the inference engine."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from perlminver.document.nodes import Document
from perlminver.version import PerlVersion

Predicate = Callable[[Document], bool]


@dataclass(frozen=True)
class Rule:
    """A syntactic check and the Perl version that introduced the feature it detects.

    A true predicate means "this document needs at least ``threshold``". It
    never implies an upper bound.
    """

    name: str
    threshold: PerlVersion
    predicate: Predicate = field(compare=False, repr=False)
    description: str = ""


class VersionMarker(BaseModel):
    """Rules (or the explicit declaration) that evidence one version."""

    model_config = ConfigDict(frozen=True)

    version: PerlVersion
    rules: tuple[str, ...]
