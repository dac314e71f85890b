from __future__ import annotations

from collections.abc import Iterator

from veni_vici.models import ATTRIBUTE_KINDS, ExclusionRule


class ExclusionList:
    """Ordered ban list, unique by (kind, value) as stored."""

    def __init__(self, rules: list[ExclusionRule] | None = None) -> None:
        self._rules: list[ExclusionRule] = []
        for rule in rules or []:
            self.add(rule.kind, rule.value)

    def add(self, kind: str, value: str) -> bool:
        """Append a rule; returns False when an identical rule is already present."""
        if kind not in ATTRIBUTE_KINDS:
            raise ValueError(f"Unknown ban kind {kind!r}; expected one of {', '.join(ATTRIBUTE_KINDS)}")
        if not value:
            raise ValueError(f"Ban rule for {kind!r} has an empty value")

        rule = ExclusionRule(kind=kind, value=value)
        if rule in self._rules:
            return False
        self._rules.append(rule)
        return True

    def remove(self, index: int) -> ExclusionRule:
        if not 0 <= index < len(self._rules):
            raise IndexError(f"No ban at position {index}")
        return self._rules.pop(index)

    def clear(self) -> None:
        self._rules.clear()

    def snapshot(self) -> tuple[ExclusionRule, ...]:
        return tuple(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[ExclusionRule]:
        return iter(self.snapshot())

    def __getitem__(self, index: int) -> ExclusionRule:
        return self._rules[index]
