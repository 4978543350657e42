"""Remote transit directions (Google Directions JSON API)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from trip_router.core.config import settings
from trip_router.models.trip import Coordinate, RouteSummary, TransportMode
from trip_router.services.exceptions import NoRouteFound, ProviderError
from trip_router.services.http import JSONRoutingClient

logger = logging.getLogger(__name__)


class TransitDirectionsClient(JSONRoutingClient):
    NO_ROUTE_STATUSES = frozenset({"ZERO_RESULTS", "NOT_FOUND"})

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else settings.GOOGLE_MAPS_API_KEY
        self.url = url or settings.TRANSIT_DIRECTIONS_URL

        if not self.api_key:
            logger.warning("GOOGLE_MAPS_API_KEY is not configured, transit legs will fail")

    async def route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TransportMode = TransportMode.TRANSIT,
    ) -> RouteSummary:
        if not self.api_key:
            raise ProviderError("GOOGLE_MAPS_API_KEY is not configured")

        params = {
            "origin": origin.as_query(),
            "destination": destination.as_query(),
            "mode": mode.value,
            "key": self.api_key,
        }
        data = await self._get_json(self.url, params)
        return self.parse_directions(data)

    def parse_directions(self, data: Dict[str, Any]) -> RouteSummary:
        """Read the first route's first leg.

        Duration is mandatory; distance is optional and counts as zero when
        the provider leaves it out.
        """

        status = data.get("status")
        if status in self.NO_ROUTE_STATUSES:
            raise NoRouteFound(status)
        if status not in (None, "OK"):
            raise ProviderError(f"{status}: {data.get('error_message', '')}".rstrip(": "))

        routes = data.get("routes") or []
        legs = routes[0].get("legs") if routes and isinstance(routes[0], dict) else None
        if not legs:
            raise NoRouteFound()

        leg = legs[0]
        if not isinstance(leg, dict):
            raise ProviderError("unexpected transit leg payload")
        duration = (leg.get("duration") or {}).get("value")
        if duration is None:
            raise ProviderError("transit leg has no duration")
        distance = (leg.get("distance") or {}).get("value", 0)

        try:
            return RouteSummary(
                distance_m=max(0.0, float(distance or 0)),
                duration_s=max(0.0, float(duration)),
            )
        except (TypeError, ValueError) as exc:
            raise ProviderError("transit leg has non-numeric metrics") from exc
