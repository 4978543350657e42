from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, ClassVar, Dict, FrozenSet, Mapping, Optional, Protocol

from trip_router.core.config import settings
from trip_router.models.trip import Coordinate, Leg, LegResult, RouteSummary, TransportMode
from trip_router.services.cache import LegCache
from trip_router.services.directions import DirectionsProvider, OSRMDirectionsClient
from trip_router.services.exceptions import ProviderError, RouteError
from trip_router.services.transit import TransitDirectionsClient

logger = logging.getLogger(__name__)

RouteFetcher = Callable[[Coordinate, Coordinate, TransportMode], Awaitable[RouteSummary]]


class RouteBackend(Protocol):
    async def compute_leg(self, leg: Leg) -> LegResult:
        ...


async def _resolve_leg(leg: Leg, fetch: RouteFetcher, cache: Optional[LegCache]) -> LegResult:
    if cache is not None:
        cached = await cache.get(leg)
        if cached is not None:
            logger.debug("Leg %s served from cache", leg.index)
            return LegResult.success(leg, cached)

    try:
        summary = await fetch(leg.origin, leg.destination, leg.mode)
    except RouteError as exc:
        logger.warning("Leg %s (%s) failed: %s", leg.index, leg.mode.value, exc)
        return LegResult.failure(leg, exc)

    if cache is not None:
        await cache.set(leg, summary)
    return LegResult.success(leg, summary)


@dataclass
class MapDirectionsBackend:
    """Driving and walking legs through a map-directions provider."""

    provider: DirectionsProvider
    cache: Optional[LegCache] = None

    modes: ClassVar[FrozenSet[TransportMode]] = frozenset(
        {TransportMode.DRIVING, TransportMode.WALKING}
    )

    async def compute_leg(self, leg: Leg) -> LegResult:
        if leg.mode not in self.modes:
            return LegResult.failure(leg, ProviderError(f"map directions cannot route {leg.mode.value}"))
        return await _resolve_leg(leg, self.provider.route, self.cache)


@dataclass
class TransitBackend:
    """Public transit legs through the remote directions API."""

    client: TransitDirectionsClient
    cache: Optional[LegCache] = None

    async def compute_leg(self, leg: Leg) -> LegResult:
        if leg.mode is not TransportMode.TRANSIT:
            return LegResult.failure(leg, ProviderError(f"transit backend cannot route {leg.mode.value}"))
        return await _resolve_leg(leg, self.client.route, self.cache)


def default_backends(cache: Optional[LegCache] = None) -> Dict[TransportMode, RouteBackend]:
    if cache is None and settings.REDIS_URL:
        cache = LegCache()

    directions = MapDirectionsBackend(OSRMDirectionsClient(), cache)
    transit = TransitBackend(TransitDirectionsClient(), cache)
    return {
        TransportMode.DRIVING: directions,
        TransportMode.WALKING: directions,
        TransportMode.TRANSIT: transit,
    }


def backend_for(mode: TransportMode, backends: Mapping[TransportMode, RouteBackend]) -> RouteBackend:
    try:
        return backends[mode]
    except KeyError:
        raise ValueError(f"No route backend registered for {mode.value}") from None
