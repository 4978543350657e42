import httpx
import pytest
from unittest.mock import AsyncMock

from trip_router.models.trip import Coordinate, Leg, RouteSummary, TransportMode
from trip_router.services.backends import MapDirectionsBackend
from trip_router.services.directions import OSRMDirectionsClient
from trip_router.services.exceptions import NoRouteFound, ProviderError

ORIGIN = Coordinate(56.3269, 44.0059)
DESTINATION = Coordinate(56.3287, 44.0020)


def _client(handler, **kwargs) -> OSRMDirectionsClient:
    return OSRMDirectionsClient(
        base_url="http://osrm.test/",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_route_uses_lon_lat_and_mode_profile():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(
            200,
            json={"code": "Ok", "routes": [{"distance": 812.4, "duration": 95.7}, {"distance": 1.0}]},
        )

    client = _client(handler)

    summary = await client.route(ORIGIN, DESTINATION, TransportMode.WALKING)

    assert summary == RouteSummary(distance_m=812.4, duration_s=95.7)
    assert seen[0].path == "/route/v1/foot/44.0059,56.3269;44.002,56.3287"
    assert seen[0].params["overview"] == "false"


@pytest.mark.asyncio
async def test_no_route_code_maps_to_no_route_found():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"code": "NoRoute", "message": "Impossible route"})

    with pytest.raises(NoRouteFound):
        await _client(handler).route(ORIGIN, DESTINATION, TransportMode.DRIVING)


@pytest.mark.asyncio
async def test_empty_routes_maps_to_no_route_found():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": "Ok", "routes": []})

    with pytest.raises(NoRouteFound):
        await _client(handler).route(ORIGIN, DESTINATION, TransportMode.DRIVING)


@pytest.mark.asyncio
async def test_invalid_query_is_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"code": "InvalidQuery", "message": "bad coordinates"})

    with pytest.raises(ProviderError, match="InvalidQuery"):
        await _client(handler).route(ORIGIN, DESTINATION, TransportMode.DRIVING)


@pytest.mark.asyncio
async def test_transport_failure_is_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError):
        await _client(handler).route(ORIGIN, DESTINATION, TransportMode.DRIVING)


@pytest.mark.asyncio
async def test_transit_mode_is_not_supported_by_osrm():
    client = _client(lambda request: httpx.Response(200, json={}))

    with pytest.raises(ProviderError):
        await client.route(ORIGIN, DESTINATION, TransportMode.TRANSIT)


@pytest.mark.asyncio
async def test_backend_wraps_provider_failures_into_leg_results():
    provider = AsyncMock()
    provider.route = AsyncMock(side_effect=[RouteSummary(100, 20), NoRouteFound()])
    backend = MapDirectionsBackend(provider)
    legs = [
        Leg(index=0, origin=ORIGIN, destination=DESTINATION, mode=TransportMode.DRIVING),
        Leg(index=1, origin=DESTINATION, destination=ORIGIN, mode=TransportMode.DRIVING),
    ]

    ok = await backend.compute_leg(legs[0])
    failed = await backend.compute_leg(legs[1])

    assert ok.ok and ok.distance_m == 100 and ok.duration_s == 20
    assert not failed.ok
    assert isinstance(failed.error, NoRouteFound)
    provider.route.assert_any_await(ORIGIN, DESTINATION, TransportMode.DRIVING)


@pytest.mark.asyncio
async def test_backend_rejects_transit_legs_without_calling_provider():
    provider = AsyncMock()
    backend = MapDirectionsBackend(provider)
    leg = Leg(index=0, origin=ORIGIN, destination=DESTINATION, mode=TransportMode.TRANSIT)

    result = await backend.compute_leg(leg)

    assert isinstance(result.error, ProviderError)
    provider.route.assert_not_awaited()
