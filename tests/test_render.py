from __future__ import annotations

from veni_vici.filtering.ban_list import ExclusionList
from veni_vici.models import BREED, TEMPERAMENT, Breed, Candidate, ExclusionRule
from veni_vici.reporting.card import NO_BANS_TEXT, NO_CAT_TEXT, render_ban_list, render_candidate


def test_render_placeholder_without_cat() -> None:
    assert render_candidate(None) == NO_CAT_TEXT


def test_render_full_card() -> None:
    cat = Candidate(
        id="abys",
        url="https://cdn2.thecatapi.com/images/abys.jpg",
        breeds=[Breed(name="Abyssinian", origin="Egypt", life_span="14 - 15", temperament="Active, Energetic")],
    )
    text = render_candidate(cat)
    assert text.splitlines() == [
        "## Abyssinian",
        "",
        "Image: https://cdn2.thecatapi.com/images/abys.jpg",
        "- Breed: Abyssinian",
        "- Origin: Egypt",
        "- Life Span: 14 - 15 years",
        "- Temperaments:",
        "  1. Active",
        "  2. Energetic",
    ]


def test_render_cat_without_breed_shows_image_only() -> None:
    assert render_candidate(Candidate(id="x", url="u")) == "Image: u"


def test_render_missing_fields_are_not_shown() -> None:
    text = render_candidate(Candidate(id="x", url="u", breeds=[Breed(name="Bengal")]))
    assert "- Origin: N/A" in text
    assert "Life Span" not in text
    assert "Temperaments" not in text


def test_render_ban_list() -> None:
    assert render_ban_list(ExclusionList()) == NO_BANS_TEXT
    bans = ExclusionList([ExclusionRule(BREED, "Persian"), ExclusionRule(TEMPERAMENT, "Playful")])
    assert render_ban_list(bans) == "1. breed: Persian\n2. temperament: Playful"
