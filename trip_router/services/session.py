from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Optional, Protocol, Tuple
from uuid import UUID

from trip_router.models.trip import (
    AnchorFlags,
    Coordinate,
    Leg,
    LegResult,
    TransportMode,
    TripTotals,
    Waypoint,
)
from trip_router.services.aggregator import AggregationOutcome, aggregate, fold_totals
from trip_router.services.backends import RouteBackend, backend_for, default_backends
from trip_router.services.exceptions import LocationUnavailable
from trip_router.services.leg_planner import build_legs, unresolved_anchors
from trip_router.services.numbering import renumber

logger = logging.getLogger(__name__)


class LiveLocationProvider(Protocol):
    def current_location(self) -> Optional[Coordinate]:
        ...


@dataclass
class StaticLocationProvider:
    location: Optional[Coordinate] = None

    def current_location(self) -> Optional[Coordinate]:
        return self.location


@dataclass(frozen=True)
class TripReport:
    run_id: int
    mode: TransportMode
    results: Tuple[LegResult, ...]
    unresolved_anchors: Tuple[LocationUnavailable, ...] = ()

    @property
    def totals(self) -> TripTotals:
        return fold_totals(self.results)

    @property
    def legs(self) -> List[Leg]:
        return [result.leg for result in self.results]

    @property
    def failed(self) -> List[LegResult]:
        return [result for result in self.results if not result.ok]


class TripSession:
    """Itinerary state owned by the presentation layer.

    Any change to the selection, mode or anchors starts a new aggregation
    run. Runs are tagged with increasing identifiers and only the latest one
    may publish its report; a superseded run finishes quietly and is dropped.
    """

    def __init__(
        self,
        backends: Optional[Mapping[TransportMode, RouteBackend]] = None,
        location_provider: Optional[LiveLocationProvider] = None,
        mode: TransportMode = TransportMode.DRIVING,
        anchors: AnchorFlags = AnchorFlags(),
        on_update: Optional[Callable[[TripReport], None]] = None,
    ) -> None:
        self.backends = backends if backends is not None else default_backends()
        self.location_provider = location_provider
        self.mode = mode
        self.anchors = anchors
        self.on_update = on_update
        self.waypoints: List[Waypoint] = []
        self.search_origin: Optional[Coordinate] = None
        self.report: Optional[TripReport] = None
        self.current_run_id = 0
        self._run_ids = itertools.count(1)

    @property
    def totals(self) -> TripTotals:
        return self.report.totals if self.report else TripTotals()

    async def replace_waypoints(
        self,
        waypoints: Iterable[Waypoint],
        search_origin: Optional[Coordinate] = None,
    ) -> Optional[TripReport]:
        self.waypoints = list(waypoints)
        self.search_origin = search_origin
        return await self.refresh()

    async def toggle_waypoint(self, waypoint_id: UUID) -> Optional[TripReport]:
        for waypoint in self.waypoints:
            if waypoint.id == waypoint_id:
                waypoint.included = not waypoint.included
                break
        else:
            raise KeyError(f"Unknown waypoint {waypoint_id}")
        return await self.refresh()

    async def set_mode(self, mode: TransportMode) -> Optional[TripReport]:
        self.mode = mode
        return await self.refresh()

    async def set_anchors(self, anchors: AnchorFlags) -> Optional[TripReport]:
        self.anchors = anchors
        return await self.refresh()

    def _live_location(self) -> Optional[Coordinate]:
        wants_location = (
            self.anchors.start_at_current_location or self.anchors.end_at_current_location
        )
        if not wants_location or self.location_provider is None:
            return None
        return self.location_provider.current_location()

    async def refresh(self) -> Optional[TripReport]:
        """Renumber, rebuild legs and aggregate them.

        Returns the published report, or ``None`` when a newer run started
        while this one was waiting on its legs.
        """

        renumber(self.waypoints)

        mode = self.mode
        live_location = self._live_location()
        legs = build_legs(
            self.waypoints,
            self.anchors,
            mode,
            live_location=live_location,
            search_origin=self.search_origin,
        )
        missing = unresolved_anchors(self.anchors, live_location, self.search_origin)

        # An unregistered mode raises here, before the in-flight run is superseded.
        backend = backend_for(mode, self.backends) if legs else None

        run_id = next(self._run_ids)
        self.current_run_id = run_id
        for problem in missing:
            logger.warning("Run %s: %s", run_id, problem)

        if backend is None:
            outcome = AggregationOutcome(totals=TripTotals(), results=[])
        else:
            outcome = await aggregate(legs, backend, run_id=run_id)

        if run_id != self.current_run_id:
            logger.info(
                "Discarding results of superseded run %s (current run %s)",
                run_id,
                self.current_run_id,
            )
            return None

        report = TripReport(
            run_id=run_id,
            mode=mode,
            results=tuple(outcome.results),
            unresolved_anchors=tuple(missing),
        )
        self.report = report
        if self.on_update is not None:
            self.on_update(report)
        return report
