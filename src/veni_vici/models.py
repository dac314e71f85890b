from __future__ import annotations

from dataclasses import dataclass, field

BREED = "breed"
ORIGIN = "origin"
TEMPERAMENT = "temperament"

ATTRIBUTE_KINDS: tuple[str, ...] = (BREED, ORIGIN, TEMPERAMENT)

# Breed descriptor field consulted for each rule kind.
BREED_FIELDS: dict[str, str] = {
    BREED: "name",
    ORIGIN: "origin",
    TEMPERAMENT: "temperament",
}


@dataclass(slots=True)
class Breed:
    name: str = ""
    origin: str = ""
    life_span: str = ""
    temperament: str = ""

    def attribute(self, kind: str) -> str:
        field_name = BREED_FIELDS.get(kind)
        if field_name is None:
            return ""
        return getattr(self, field_name) or ""

    def temperaments(self) -> list[str]:
        return [t.strip() for t in self.temperament.split(",") if t.strip()]


@dataclass(slots=True)
class Candidate:
    id: str
    url: str
    width: int | None = None
    height: int | None = None
    breeds: list[Breed] = field(default_factory=list)

    @property
    def breed(self) -> Breed | None:
        return self.breeds[0] if self.breeds else None


@dataclass(frozen=True, slots=True)
class ExclusionRule:
    kind: str
    value: str

    def label(self) -> str:
        return f"{self.kind}: {self.value}"


@dataclass(slots=True)
class Accepted:
    candidate: Candidate
    attempts: int


@dataclass(slots=True)
class NotFound:
    attempts: int


@dataclass(slots=True)
class FetchFailure:
    message: str
    attempts: int


DiscoveryOutcome = Accepted | NotFound | FetchFailure
