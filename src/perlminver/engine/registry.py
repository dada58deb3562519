"""Immutable, ordered rule registry and the builder that produces it."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from perlminver.engine.models import Predicate, Rule
from perlminver.errors import RegistryError
from perlminver.version import PerlVersion


class RuleRegistry:
    """Rules sorted by descending threshold, ties broken by ascending name.

    The order is fixed at construction, so iteration is reproducible and a
    scan that stops at the first match has found the highest threshold.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        by_name = sorted(rules, key=lambda r: r.name)
        seen: set[str] = set()
        for rule in by_name:
            if rule.name in seen:
                raise RegistryError(f"Duplicate rule name: {rule.name}")
            seen.add(rule.name)
        # Stable sort keeps the name order within equal thresholds
        self._rules: tuple[Rule, ...] = tuple(
            sorted(by_name, key=lambda r: r.threshold, reverse=True)
        )

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return any(rule.name == name for rule in self._rules)

    def __getitem__(self, name: str) -> Rule:
        for rule in self._rules:
            if rule.name == name:
                return rule
        raise RegistryError(f"Unknown rule: {name}")

    def __repr__(self) -> str:
        return f"RuleRegistry({len(self._rules)} rules)"

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def names(self) -> list[str]:
        return [rule.name for rule in self._rules]

    def without(self, names: Iterable[str]) -> RuleRegistry:
        """Return a new registry with the named rules removed."""
        excluded = set(names)
        unknown = excluded - set(self.names())
        if unknown:
            raise RegistryError(f"Unknown rule(s): {', '.join(sorted(unknown))}")
        return RuleRegistry(rule for rule in self._rules if rule.name not in excluded)


class RegistryBuilder:
    """Collects rules through explicit ``register`` calls, then freezes them."""

    def __init__(self) -> None:
        self._rules: list[Rule] = []

    def register(
        self,
        name: str,
        threshold: PerlVersion | str,
        predicate: Predicate,
        description: str = "",
    ) -> RegistryBuilder:
        if isinstance(threshold, str):
            threshold = PerlVersion.parse(threshold)
        self._rules.append(
            Rule(name=name, threshold=threshold, predicate=predicate, description=description)
        )
        return self

    def build(self) -> RuleRegistry:
        return RuleRegistry(self._rules)
