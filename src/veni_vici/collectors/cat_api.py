from __future__ import annotations

import logging
from typing import Any

import requests

from veni_vici.config import CatApiConfig
from veni_vici.models import Breed, Candidate

LOGGER = logging.getLogger(__name__)


class CatApiError(RuntimeError):
    """Raised when TheCatAPI is unreachable or returns a non-success response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CatApiClient:
    """Thin TheCatAPI client returning one random cat with breed data per call."""

    def __init__(
        self,
        config: CatApiConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or CatApiConfig()
        self.base_url = self.config.base_url.rstrip("/")
        self.session = session or requests.Session()

    def fetch_candidate(self) -> Candidate:
        payload = self._request("GET", self.config.search_path, params={"limit": "1", "has_breeds": "1"})
        if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
            raise CatApiError(f"GET {self.config.search_path} returned no image record")
        return parse_candidate(payload[0])

    def _request(self, method: str, path: str, *, params: dict[str, str] | None = None) -> Any:
        headers: dict[str, str] = {}
        if self.config.api_key:
            headers["x-api-key"] = self.config.api_key

        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise CatApiError(f"{method} {path} failed: {exc}") from exc

        if not response.ok:
            raise CatApiError(
                f"{method} {path} failed ({response.status_code}): {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise CatApiError(f"{method} {path} returned invalid JSON") from exc


def parse_candidate(row: dict[str, Any]) -> Candidate:
    raw_breeds = row.get("breeds")
    items = raw_breeds if isinstance(raw_breeds, list) else []
    breeds = [_parse_breed(item) for item in items if isinstance(item, dict)]
    return Candidate(
        id=str(row.get("id", "")).strip(),
        url=str(row.get("url", "")).strip(),
        width=_to_int(row.get("width")),
        height=_to_int(row.get("height")),
        breeds=breeds,
    )


def _parse_breed(item: dict[str, Any]) -> Breed:
    return Breed(
        name=_to_text(item.get("name")),
        origin=_to_text(item.get("origin")),
        life_span=_to_text(item.get("life_span")),
        temperament=_to_text(item.get("temperament")),
    )


def _to_text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _to_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value))
    except (TypeError, ValueError):
        return None
