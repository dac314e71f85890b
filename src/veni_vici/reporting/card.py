from __future__ import annotations

from veni_vici.filtering.ban_list import ExclusionList
from veni_vici.models import Candidate

NO_CAT_TEXT = 'Type "discover" to see a cat!'
NO_BANS_TEXT = "No bans yet."


def render_candidate(candidate: Candidate | None) -> str:
    if candidate is None:
        return NO_CAT_TEXT

    lines = [f"Image: {candidate.url or 'N/A'}"]
    breed = candidate.breed
    if breed is None:
        return "\n".join(lines)

    traits = breed.temperaments()
    lines = [
        f"## {breed.name or 'Unknown breed'}",
        "",
        *lines,
        f"- Breed: {breed.name or 'N/A'}",
        f"- Origin: {breed.origin or 'N/A'}",
    ]
    if breed.life_span:
        lines.append(f"- Life Span: {breed.life_span} years")
    if traits:
        lines.append("- Temperaments:")
        lines.extend(f"  {idx}. {trait}" for idx, trait in enumerate(traits, start=1))
    return "\n".join(lines)


def render_ban_list(bans: ExclusionList) -> str:
    if not len(bans):
        return NO_BANS_TEXT
    return "\n".join(f"{idx}. {rule.label()}" for idx, rule in enumerate(bans, start=1))
