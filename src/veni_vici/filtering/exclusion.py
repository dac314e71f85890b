from __future__ import annotations

from collections.abc import Iterable

from veni_vici.models import TEMPERAMENT, Candidate, ExclusionRule


def is_excluded(candidate: Candidate, rules: Iterable[ExclusionRule]) -> bool:
    """True when any rule matches the candidate's first breed."""
    breed = candidate.breed
    if breed is None:
        return False
    return any(_rule_matches(breed.attribute(rule.kind), rule) for rule in rules)


def matching_rules(candidate: Candidate, rules: Iterable[ExclusionRule]) -> list[ExclusionRule]:
    breed = candidate.breed
    if breed is None:
        return []
    return [rule for rule in rules if _rule_matches(breed.attribute(rule.kind), rule)]


def _rule_matches(attribute_value: str, rule: ExclusionRule) -> bool:
    if not attribute_value:
        return False
    wanted = rule.value.lower()
    if rule.kind == TEMPERAMENT:
        return wanted in {part.strip() for part in attribute_value.lower().split(",")}
    return attribute_value.lower() == wanted
