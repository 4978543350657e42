"""Map-directions provider for driving and walking legs, backed by OSRM."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Protocol

from trip_router.core.config import settings
from trip_router.models.trip import Coordinate, RouteSummary, TransportMode
from trip_router.services.exceptions import NoRouteFound, ProviderError
from trip_router.services.http import JSONRoutingClient

logger = logging.getLogger(__name__)


class DirectionsProvider(Protocol):
    async def route(
        self, origin: Coordinate, destination: Coordinate, mode: TransportMode
    ) -> RouteSummary:
        ...


class OSRMDirectionsClient(JSONRoutingClient):
    """Talks to an OSRM ``/route`` endpoint and normalises the first route.

    OSRM expects ``lon,lat`` pairs; everything else in the package uses
    ``lat, lon``.
    """

    NO_ROUTE_CODES = frozenset({"NoRoute", "NoSegment"})

    def __init__(
        self,
        base_url: Optional[str] = None,
        profiles: Optional[Mapping[TransportMode, str]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.base_url = (base_url or settings.OSRM_BASE_URL).rstrip("/")
        self.profiles: Dict[TransportMode, str] = dict(
            profiles
            or {
                TransportMode.DRIVING: settings.OSRM_DRIVING_PROFILE,
                TransportMode.WALKING: settings.OSRM_WALKING_PROFILE,
            }
        )

    def format_coordinates(self, origin: Coordinate, destination: Coordinate) -> str:
        return f"{origin.lon},{origin.lat};{destination.lon},{destination.lat}"

    async def route(
        self, origin: Coordinate, destination: Coordinate, mode: TransportMode
    ) -> RouteSummary:
        profile = self.profiles.get(mode)
        if profile is None:
            raise ProviderError(f"OSRM has no profile for {mode.value}")

        url = f"{self.base_url}/route/v1/{profile}/{self.format_coordinates(origin, destination)}"
        # OSRM reports unroutable queries as HTTP 400 with a code in the body.
        data = await self._get_json(
            url,
            params={"overview": "false", "alternatives": "false"},
            accept_statuses=(200, 400),
        )
        return self.parse_route(data)

    def parse_route(self, data: Dict[str, Any]) -> RouteSummary:
        code = data.get("code")
        if code in self.NO_ROUTE_CODES:
            raise NoRouteFound(data.get("message") or code)
        if code != "Ok":
            raise ProviderError(f"OSRM error {code}: {data.get('message', 'unknown error')}")

        routes = data.get("routes") or []
        if not routes:
            raise NoRouteFound()

        route = routes[0]
        try:
            distance = float(route.get("distance", 0) or 0)
            duration = float(route.get("duration", 0) or 0)
        except (TypeError, ValueError) as exc:
            raise ProviderError("OSRM returned non-numeric route metrics") from exc

        return RouteSummary(distance_m=max(0.0, distance), duration_s=max(0.0, duration))
