from __future__ import annotations

import asyncio
from collections.abc import Iterable
import logging
from typing import Protocol

from veni_vici.collectors.cat_api import CatApiClient, CatApiError
from veni_vici.config import DEFAULT_MAX_ATTEMPTS, AppConfig
from veni_vici.filtering.ban_list import ExclusionList
from veni_vici.filtering.exclusion import matching_rules
from veni_vici.models import (
    TEMPERAMENT,
    Accepted,
    Candidate,
    DiscoveryOutcome,
    ExclusionRule,
    FetchFailure,
    NotFound,
)

LOGGER = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch cat data. Try again."
NOT_FOUND_MESSAGE = "No more cats available due to your ban list"


class CandidateSource(Protocol):
    def fetch_candidate(self) -> Candidate: ...


class DiscoveryInProgressError(RuntimeError):
    """Raised when discover() is called while a previous discovery is still running."""


class DiscoveryLoop:
    """Fetch-and-filter loop: sample one cat at a time until one passes the bans."""

    def __init__(self, source: CandidateSource, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.source = source
        self.max_attempts = max_attempts

    async def discover(self, rules: Iterable[ExclusionRule]) -> DiscoveryOutcome:
        snapshot = tuple(rules)
        for attempt in range(1, self.max_attempts + 1):
            try:
                candidate = await asyncio.to_thread(self.source.fetch_candidate)
            except CatApiError as exc:
                # Transport and HTTP errors end the loop; only banned content is retried.
                LOGGER.warning("Cat fetch failed on attempt %s: %s", attempt, exc)
                return FetchFailure(message=str(exc), attempts=attempt)

            matched = matching_rules(candidate, snapshot)
            if not matched:
                LOGGER.debug("Accepted cat %s on attempt %s", candidate.id, attempt)
                return Accepted(candidate=candidate, attempts=attempt)
            LOGGER.debug(
                "Rejected cat %s on attempt %s (%s)",
                candidate.id,
                attempt,
                ", ".join(rule.label() for rule in matched),
            )

        LOGGER.info("Every one of %s sampled cats was banned", self.max_attempts)
        return NotFound(attempts=self.max_attempts)


async def discover(
    rules: Iterable[ExclusionRule],
    source: CandidateSource | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> DiscoveryOutcome:
    return await DiscoveryLoop(source or CatApiClient(), max_attempts=max_attempts).discover(rules)


class DiscoverySession:
    """State behind the UI: the shown cat, the ban list, busy flag and last error."""

    def __init__(
        self,
        config: AppConfig,
        source: CandidateSource | None = None,
        bans: list[ExclusionRule] | None = None,
    ) -> None:
        self.config = config
        self.loop = DiscoveryLoop(
            source or CatApiClient(config.cat_api),
            max_attempts=config.discovery.max_attempts,
        )
        self.bans = ExclusionList(bans)
        self.current: Candidate | None = None
        self.busy = False
        self.error: str | None = None

    async def discover(self) -> DiscoveryOutcome:
        if self.busy:
            raise DiscoveryInProgressError("A discovery is already running")

        self.busy = True
        self.error = None
        try:
            outcome = await self.loop.discover(self.bans.snapshot())
        finally:
            self.busy = False

        if isinstance(outcome, Accepted):
            self.current = outcome.candidate
        elif isinstance(outcome, NotFound):
            self.current = None
            self.error = NOT_FOUND_MESSAGE
        else:
            self.error = FETCH_FAILED_MESSAGE
        return outcome

    def ban(self, kind: str, value: str) -> bool:
        return self.bans.add(kind, value)

    def ban_current(self, kind: str, trait: str | None = None) -> bool:
        """Ban an attribute of the shown cat.

        For ``temperament`` the trait must name one of the cat's traits, either
        verbatim or as its 1-based position in the trait list.
        """
        breed = self.current.breed if self.current is not None else None
        if breed is None:
            raise ValueError("No cat with breed data is shown")

        if kind == TEMPERAMENT:
            traits = breed.temperaments()
            if trait is None:
                raise ValueError("Pick a temperament trait to ban")
            if trait.isdigit():
                position = int(trait)
                if not 1 <= position <= len(traits):
                    raise ValueError(f"No temperament trait #{position}")
                return self.bans.add(kind, traits[position - 1])
            matches = [t for t in traits if t.lower() == trait.strip().lower()]
            if not matches:
                raise ValueError(f"{trait!r} is not a temperament of this cat")
            return self.bans.add(kind, matches[0])

        return self.bans.add(kind, breed.attribute(kind))

    def unban(self, index: int) -> ExclusionRule:
        return self.bans.remove(index)

    def clear_bans(self) -> None:
        self.bans.clear()
