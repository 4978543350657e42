from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from trip_router.services.exceptions import RouteError


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float

    def midpoint(self, other: "Coordinate") -> "Coordinate":
        return Coordinate((self.lat + other.lat) / 2, (self.lon + other.lon) / 2)

    def as_query(self) -> str:
        return f"{self.lat},{self.lon}"


class TransportMode(str, Enum):
    DRIVING = "driving"
    WALKING = "walking"
    TRANSIT = "transit"


@dataclass
class Waypoint:
    """A candidate stop. Identity is stable for the lifetime of a search session."""

    name: str
    coordinate: Coordinate
    included: bool = True
    number: int = 0
    id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class AnchorFlags:
    start_at_current_location: bool = False
    end_at_current_location: bool = False


@dataclass(frozen=True)
class Leg:
    index: int
    origin: Coordinate
    destination: Coordinate
    mode: TransportMode


@dataclass(frozen=True)
class RouteSummary:
    """Distance and duration of a single provider route, unrounded."""

    distance_m: float
    duration_s: float


@dataclass(frozen=True)
class LegResult:
    leg: Leg
    distance_m: float = 0.0
    duration_s: float = 0.0
    error: Optional["RouteError"] = None

    @classmethod
    def success(cls, leg: Leg, summary: RouteSummary) -> "LegResult":
        return cls(leg=leg, distance_m=summary.distance_m, duration_s=summary.duration_s)

    @classmethod
    def failure(cls, leg: Leg, error: "RouteError") -> "LegResult":
        return cls(leg=leg, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def midpoint(self) -> Coordinate:
        return self.leg.origin.midpoint(self.leg.destination)


@dataclass(frozen=True)
class TripTotals:
    distance_m: float = 0.0
    duration_s: float = 0.0

    def __add__(self, other: "TripTotals") -> "TripTotals":
        return TripTotals(
            self.distance_m + other.distance_m,
            self.duration_s + other.duration_s,
        )
