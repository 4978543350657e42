import os
import sys
from pathlib import Path

os.environ.setdefault("GOOGLE_MAPS_API_KEY", "test-google-key")
os.environ.setdefault("OSRM_BASE_URL", "http://osrm.test")
os.environ.pop("REDIS_URL", None)

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import asyncio
from typing import Dict, List, Optional

import pytest

from trip_router.models.trip import Coordinate, Leg, LegResult, RouteSummary, Waypoint
from trip_router.services.exceptions import RouteError


class FakeBackend:
    """Scripted backend keyed by leg index; records call and arrival order."""

    def __init__(
        self,
        responses: Optional[Dict[int, object]] = None,
        default: object = RouteSummary(distance_m=1000, duration_s=600),
        delays: Optional[Dict[int, float]] = None,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        self.responses = responses or {}
        self.default = default
        self.delays = delays or {}
        self.gate = gate
        self.calls: List[Leg] = []
        self.completed: List[int] = []

    async def compute_leg(self, leg: Leg) -> LegResult:
        self.calls.append(leg)
        if self.gate is not None:
            await self.gate.wait()
        await asyncio.sleep(self.delays.get(leg.index, 0))
        response = self.responses.get(leg.index, self.default)
        self.completed.append(leg.index)
        if isinstance(response, RouteError):
            return LegResult.failure(leg, response)
        if isinstance(response, Exception):
            raise response
        return LegResult.success(leg, response)


def make_waypoints(count: int, included: Optional[List[bool]] = None) -> List[Waypoint]:
    flags = included or [True] * count
    return [
        Waypoint(
            name=f"Place {idx + 1}",
            coordinate=Coordinate(56.30 + idx * 0.01, 43.90 + idx * 0.01),
            included=flags[idx],
        )
        for idx in range(count)
    ]


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()
