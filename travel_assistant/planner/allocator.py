"""Greedy admission of scored stops under a time budget."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence
import logging
import os

from travel_assistant.schemas import ScoredDestination

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("TRAVEL_ASSISTANT_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False

AVERAGE_SPEED_KMH = 40.0


@dataclass
class Allocation:
    accepted: List[ScoredDestination] = field(default_factory=list)
    rejected: List[ScoredDestination] = field(default_factory=list)
    committed_time: float = 0.0
    estimated_return_time: float = 0.0
    remaining_time: float = 0.0


def return_leg_minutes(dest: ScoredDestination) -> float:
    """Minutes from ``dest`` back to the home address.

    Uses ``distance_to_source`` at the assumed average speed; without it the
    outbound travel time stands in for the way back.
    """
    if dest.distance_to_source is not None:
        return dest.distance_to_source * 60 / AVERAGE_SPEED_KMH
    return dest.travel_time_from_source


def allocate(scored: Sequence[ScoredDestination], available_minutes: float) -> Allocation:
    # sorted() is stable, so equal scores keep their input order.
    ordered = sorted(scored, key=lambda d: d.score, reverse=True)
    result = Allocation()

    committed = 0.0
    for dest in ordered:
        tentative = committed + dest.combined_time
        return_leg = return_leg_minutes(dest)
        if tentative + return_leg <= available_minutes:
            result.accepted.append(dest)
            committed = tentative
            logger.debug(
                "Admitted %s (score %.3f): committed %.1f + return %.1f of %.1f min",
                dest.name,
                dest.score,
                committed,
                return_leg,
                available_minutes,
            )
        else:
            result.rejected.append(dest)
            logger.debug(
                "Skipped %s (score %.3f): needs %.1f min of %.1f",
                dest.name,
                dest.score,
                tentative + return_leg,
                available_minutes,
            )

    # Only one trip home happens, from the last admitted stop.
    if result.accepted:
        result.estimated_return_time = return_leg_minutes(result.accepted[-1])

    # Same running total the admission check used, so an exact fit stays at zero.
    result.committed_time = committed
    result.remaining_time = max(0.0, available_minutes - (committed + result.estimated_return_time))
    return result
