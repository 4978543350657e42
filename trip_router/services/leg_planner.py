from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from trip_router.models.trip import AnchorFlags, Coordinate, Leg, TransportMode, Waypoint
from trip_router.services.exceptions import LocationUnavailable
from trip_router.services.numbering import included_waypoints

logger = logging.getLogger(__name__)


def build_legs(
    waypoints: Sequence[Waypoint],
    anchors: AnchorFlags,
    mode: TransportMode,
    live_location: Optional[Coordinate] = None,
    search_origin: Optional[Coordinate] = None,
) -> List[Leg]:
    """Turn the included waypoints into ordered origin/destination legs.

    The start anchor resolves to the live location, falling back to the
    search origin. The end anchor only resolves to the live location.
    Unresolvable anchors are skipped.
    """

    stops = [waypoint.coordinate for waypoint in included_waypoints(waypoints)]
    if not stops:
        return []

    points: List[Coordinate] = []
    if anchors.start_at_current_location:
        start = live_location or search_origin
        if start is not None:
            points.append(start)
        else:
            logger.debug("Start anchor requested without a location, skipping")

    points.extend(stops)

    if anchors.end_at_current_location:
        if live_location is not None:
            points.append(live_location)
        else:
            logger.debug("End anchor requested without a live location, skipping")

    return [
        Leg(index=idx, origin=origin, destination=destination, mode=mode)
        for idx, (origin, destination) in enumerate(zip(points, points[1:]))
    ]


def unresolved_anchors(
    anchors: AnchorFlags,
    live_location: Optional[Coordinate] = None,
    search_origin: Optional[Coordinate] = None,
) -> List[LocationUnavailable]:
    missing: List[LocationUnavailable] = []
    if anchors.start_at_current_location and live_location is None and search_origin is None:
        missing.append(LocationUnavailable("start"))
    if anchors.end_at_current_location and live_location is None:
        missing.append(LocationUnavailable("end"))
    return missing
