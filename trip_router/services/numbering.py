from __future__ import annotations

from typing import List, Sequence

from trip_router.models.trip import Waypoint


def included_waypoints(waypoints: Sequence[Waypoint]) -> List[Waypoint]:
    return [waypoint for waypoint in waypoints if waypoint.included]


def renumber(waypoints: Sequence[Waypoint]) -> Sequence[Waypoint]:
    """Assign 1-based visiting numbers to included waypoints in collection order.

    Excluded waypoints keep whatever number they had last.
    """

    for rank, waypoint in enumerate(included_waypoints(waypoints), start=1):
        waypoint.number = rank
    return waypoints
