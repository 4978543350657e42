"""Concurrent fan-out of leg requests and fold into trip totals."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from trip_router.core.tracing import reset_run_id, set_run_id
from trip_router.models.trip import Leg, LegResult, TripTotals
from trip_router.services.backends import RouteBackend
from trip_router.services.exceptions import ProviderError, RouteError

logger = logging.getLogger(__name__)


class AggregationState(str, Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"
    WAITING = "waiting"
    SETTLED = "settled"


@dataclass(frozen=True)
class AggregationOutcome:
    totals: TripTotals
    results: List[LegResult]

    @property
    def failed(self) -> List[LegResult]:
        return [result for result in self.results if not result.ok]

    @property
    def succeeded(self) -> List[LegResult]:
        return [result for result in self.results if result.ok]


def fold_totals(results: Sequence[LegResult]) -> TripTotals:
    totals = TripTotals()
    for result in results:
        if result.ok:
            totals += TripTotals(result.distance_m, result.duration_s)
    return totals


class AggregationRun:
    """One memoryless aggregation pass over a fixed list of legs.

    Every leg is dispatched at once and the run waits for all of them; a
    failing leg never cancels its siblings. Results land in a slot per leg
    and are folded only after the join.
    """

    def __init__(
        self,
        legs: Sequence[Leg],
        backend: RouteBackend,
        run_id: Optional[int] = None,
    ) -> None:
        self.legs = list(legs)
        self.backend = backend
        self.run_id = run_id
        self.state = AggregationState.IDLE
        self.pending = 0

    async def execute(self) -> AggregationOutcome:
        token = set_run_id(self.run_id) if self.run_id is not None else None
        try:
            self.state = AggregationState.DISPATCHING
            slots: List[Optional[LegResult]] = [None] * len(self.legs)
            calls = [self._settle(slot, leg, slots) for slot, leg in enumerate(self.legs)]

            self.pending = len(calls)
            self.state = AggregationState.WAITING
            await asyncio.gather(*calls)

            results = [result for result in slots if result is not None]
            totals = fold_totals(results)
            self.state = AggregationState.SETTLED

            outcome = AggregationOutcome(totals=totals, results=results)
            logger.info(
                "Aggregated %s legs: %.0f m, %.0f s (%s failed)",
                len(results),
                totals.distance_m,
                totals.duration_s,
                len(outcome.failed),
            )
            return outcome
        finally:
            reset_run_id(token)

    async def _settle(self, slot: int, leg: Leg, slots: List[Optional[LegResult]]) -> None:
        try:
            result = await self.backend.compute_leg(leg)
        except RouteError as exc:
            logger.warning("Leg %s failed: %s", leg.index, exc)
            result = LegResult.failure(leg, exc)
        except Exception as exc:
            logger.exception("Unexpected backend failure on leg %s", leg.index)
            result = LegResult.failure(leg, ProviderError(str(exc) or type(exc).__name__))

        slots[slot] = result
        self.pending -= 1


async def aggregate(
    legs: Sequence[Leg],
    backend: RouteBackend,
    run_id: Optional[int] = None,
) -> AggregationOutcome:
    return await AggregationRun(legs, backend, run_id=run_id).execute()
