"""Aggregate statistics over an accepted route."""
from __future__ import annotations

from typing import Sequence

from travel_assistant.schemas import ScoredDestination, TripSummary


def build_summary(route: Sequence[ScoredDestination], return_time: float = 0.0) -> TripSummary:
    count = len(route)
    total_visit = sum(d.visit_time for d in route)
    total_travel = sum(d.travel_time_from_source for d in route)
    total_distance = sum(d.distance_from_source for d in route)
    return TripSummary(
        total_locations=count,
        total_visit_time=total_visit,
        total_travel_time=total_travel,
        total_distance=total_distance,
        average_rating=_average([d.rating for d in route]),
        average_score=_average([d.score for d in route]),
        total_trip_time=total_visit + total_travel + (return_time if count else 0.0),
    )


def _average(values: Sequence[float]) -> float:
    # Empty routes average to 0 rather than raising.
    if not values:
        return 0.0
    return sum(values) / len(values)
