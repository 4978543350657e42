"""Multi-stop itinerary routing: leg planning and concurrent route aggregation."""

from .core.logging import configure_logging
from .models.trip import (
    AnchorFlags,
    Coordinate,
    Leg,
    LegResult,
    RouteSummary,
    TransportMode,
    TripTotals,
    Waypoint,
)
from .services.aggregator import AggregationOutcome, AggregationRun, AggregationState, aggregate
from .services.exceptions import LocationUnavailable, NoRouteFound, ProviderError, RouteError
from .services.leg_planner import build_legs
from .services.numbering import renumber
from .services.session import StaticLocationProvider, TripReport, TripSession

__all__ = [
    "configure_logging",
    "AnchorFlags",
    "Coordinate",
    "Leg",
    "LegResult",
    "RouteSummary",
    "TransportMode",
    "TripTotals",
    "Waypoint",
    "AggregationOutcome",
    "AggregationRun",
    "AggregationState",
    "aggregate",
    "LocationUnavailable",
    "NoRouteFound",
    "ProviderError",
    "RouteError",
    "build_legs",
    "renumber",
    "StaticLocationProvider",
    "TripReport",
    "TripSession",
]
