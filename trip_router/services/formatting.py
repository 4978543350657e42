from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from trip_router.models.trip import Coordinate, LegResult


@dataclass(frozen=True)
class LegAnnotation:
    position: Coordinate
    distance_m: float
    duration_s: float
    label: str


def format_duration(seconds: float) -> str:
    total_minutes = int(max(0.0, seconds) // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours} hr {minutes} min"
    return f"{minutes} min"


def leg_annotations(results: Sequence[LegResult]) -> List[LegAnnotation]:
    """Per-leg labels placed at the midpoint of each successfully routed leg."""

    return [
        LegAnnotation(
            position=result.midpoint,
            distance_m=result.distance_m,
            duration_s=result.duration_s,
            label=format_duration(result.duration_s),
        )
        for result in results
        if result.ok
    ]
