from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any

import yaml

from veni_vici.models import ATTRIBUTE_KINDS, BREED, ORIGIN, TEMPERAMENT, ExclusionRule

DEFAULT_BASE_URL = "https://api.thecatapi.com"
DEFAULT_SEARCH_PATH = "/v1/images/search"
DEFAULT_MAX_ATTEMPTS = 10

DEFAULT_PRESET_BANS: tuple[ExclusionRule, ...] = (
    ExclusionRule(kind=BREED, value="Persian"),
    ExclusionRule(kind=ORIGIN, value="Japan"),
    ExclusionRule(kind=TEMPERAMENT, value="Playful"),
)


@dataclass(slots=True)
class CatApiConfig:
    base_url: str = DEFAULT_BASE_URL
    search_path: str = DEFAULT_SEARCH_PATH
    timeout_seconds: int = 15
    api_key: str | None = None


@dataclass(slots=True)
class DiscoveryConfig:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS


@dataclass(slots=True)
class AppConfig:
    name: str = "veni-vici"
    cat_api: CatApiConfig = field(default_factory=CatApiConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    preset_bans: list[ExclusionRule] = field(default_factory=lambda: list(DEFAULT_PRESET_BANS))


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        loaded = yaml.safe_load(fh)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Invalid config: {path}")
    return loaded


def load_config(path: str | Path | None = None) -> AppConfig:
    """Build the app config from an optional YAML file plus environment overrides."""
    loaded = _load_yaml(Path(path)) if path is not None else {}

    cat_api = CatApiConfig(**_section(loaded, "cat_api"))
    discovery = DiscoveryConfig(**_section(loaded, "discovery"))
    _require_positive_int("discovery.max_attempts", discovery.max_attempts)
    _require_positive_int("cat_api.timeout_seconds", cat_api.timeout_seconds)

    cat_api.base_url = os.getenv("CAT_API_BASE_URL", "").strip() or cat_api.base_url
    cat_api.api_key = os.getenv("CAT_API_KEY", "").strip() or cat_api.api_key
    cat_api.timeout_seconds = _read_int_env(
        "CAT_API_TIMEOUT_SECONDS",
        default=cat_api.timeout_seconds,
        minimum=1,
        maximum=120,
    )

    if "preset_bans" in loaded:
        preset_bans = [parse_rule(item) for item in loaded["preset_bans"] or []]
    else:
        preset_bans = list(DEFAULT_PRESET_BANS)

    return AppConfig(
        name=loaded.get("name", "veni-vici"),
        cat_api=cat_api,
        discovery=discovery,
        preset_bans=preset_bans,
    )


def parse_rule(raw: Any) -> ExclusionRule:
    """Accept either a ``{kind, value}`` mapping or a ``kind=value`` string."""
    if isinstance(raw, dict):
        kind = str(raw.get("kind", "")).strip()
        value = str(raw.get("value", "")).strip()
    elif isinstance(raw, str) and "=" in raw:
        kind, _, value = raw.partition("=")
        kind, value = kind.strip(), value.strip()
    else:
        raise ValueError(f"Invalid ban rule: {raw!r}")

    if kind not in ATTRIBUTE_KINDS:
        raise ValueError(f"Unknown ban kind {kind!r}; expected one of {', '.join(ATTRIBUTE_KINDS)}")
    if not value:
        raise ValueError(f"Ban rule for {kind!r} has an empty value")
    return ExclusionRule(kind=kind, value=value)


def _require_positive_int(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be an integer >= 1, got {value!r}")


def _section(loaded: dict[str, Any], key: str) -> dict[str, Any]:
    section = loaded.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section {key!r} must be a mapping")
    return section


def _read_int_env(name: str, *, default: int, minimum: int, maximum: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, min(maximum, value))
