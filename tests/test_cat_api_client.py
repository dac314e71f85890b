from __future__ import annotations

import asyncio
from typing import Any

import pytest
import requests

from veni_vici.collectors.cat_api import CatApiClient, CatApiError, parse_candidate
from veni_vici.config import CatApiConfig
from veni_vici.models import ORIGIN, Accepted, ExclusionRule
from veni_vici.pipeline import DiscoveryLoop


class _FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class _FakeSession:
    def __init__(self, response: _FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> _FakeResponse:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


SAMPLE_RECORD = {
    "id": "0XYvRd7oD",
    "url": "https://cdn2.thecatapi.com/images/0XYvRd7oD.jpg",
    "width": 1204,
    "height": 1445,
    "breeds": [
        {
            "id": "abys",
            "name": "Abyssinian",
            "origin": "Egypt",
            "life_span": "14 - 15",
            "temperament": "Active, Energetic, Independent, Intelligent, Gentle",
        }
    ],
}


def test_fetch_candidate_requests_one_cat_with_breeds() -> None:
    session = _FakeSession(_FakeResponse(200, [SAMPLE_RECORD]))
    client = CatApiClient(CatApiConfig(base_url="https://api.thecatapi.com/", api_key="k"), session=session)

    candidate = client.fetch_candidate()

    assert candidate.id == "0XYvRd7oD"
    assert candidate.breed is not None
    assert candidate.breed.name == "Abyssinian"
    assert candidate.breed.life_span == "14 - 15"
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://api.thecatapi.com/v1/images/search"
    assert call["params"] == {"limit": "1", "has_breeds": "1"}
    assert call["headers"] == {"x-api-key": "k"}


def test_no_api_key_sends_no_header() -> None:
    session = _FakeSession(_FakeResponse(200, [SAMPLE_RECORD]))
    CatApiClient(CatApiConfig(), session=session).fetch_candidate()
    assert session.calls[0]["headers"] == {}


def test_non_success_status_raises() -> None:
    session = _FakeSession(_FakeResponse(503, text="unavailable"))
    with pytest.raises(CatApiError) as excinfo:
        CatApiClient(session=session).fetch_candidate()
    assert excinfo.value.status_code == 503
    assert "503" in str(excinfo.value)


def test_transport_error_is_wrapped() -> None:
    session = _FakeSession(error=requests.ConnectionError("boom"))
    with pytest.raises(CatApiError) as excinfo:
        CatApiClient(session=session).fetch_candidate()
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


@pytest.mark.parametrize("payload", [[], {"message": "x"}, ["not-a-record"]])
def test_unexpected_body_raises(payload: Any) -> None:
    session = _FakeSession(_FakeResponse(200, payload))
    with pytest.raises(CatApiError):
        CatApiClient(session=session).fetch_candidate()


def test_invalid_json_raises() -> None:
    session = _FakeSession(_FakeResponse(200, None))
    with pytest.raises(CatApiError):
        CatApiClient(session=session).fetch_candidate()


def test_parse_candidate_tolerates_missing_fields() -> None:
    candidate = parse_candidate({"id": "x", "url": "u", "width": "640", "breeds": [{"name": "Bengal", "origin": None}]})
    assert candidate.width == 640
    assert candidate.height is None
    assert candidate.breed is not None
    assert candidate.breed.origin == ""
    assert candidate.breed.temperaments() == []


def test_parse_candidate_without_breeds() -> None:
    candidate = parse_candidate({"id": "x", "url": "u", "breeds": None})
    assert candidate.breeds == []
    assert candidate.breed is None


@pytest.mark.parametrize("breeds", [5, "x", {"name": "Bengal"}])
def test_non_list_breeds_degrade_to_no_breeds(breeds: Any) -> None:
    session = _FakeSession(_FakeResponse(200, [{"id": "x", "url": "u", "breeds": breeds}]))

    candidate = CatApiClient(session=session).fetch_candidate()

    assert candidate.breeds == []


def test_malformed_breeds_record_is_accepted_by_loop() -> None:
    session = _FakeSession(_FakeResponse(200, [{"id": "x", "url": "u", "breeds": 5}]))
    loop = DiscoveryLoop(CatApiClient(session=session))

    outcome = asyncio.run(loop.discover([ExclusionRule(ORIGIN, "Japan")]))

    assert isinstance(outcome, Accepted)
    assert outcome.candidate.id == "x"
