"""Multi-criteria desirability scoring for candidate stops."""
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from travel_assistant.schemas import Destination, ScoredDestination

# Fixed scoring policy. Not user-configurable so runs stay reproducible.
SCORE_WEIGHTS: Dict[str, float] = {
    "rating": 0.30,
    "distance": 0.25,
    "time": 0.20,
    "preference": 0.15,
    "popularity": 0.10,
}

DEFAULT_POPULARITY = 5.0
MAX_RATING = 5.0
MAX_POPULARITY = 10.0

PREFERENCE_MATCH = 1.0
PREFERENCE_MISS = 0.3
PREFERENCE_NEUTRAL = 0.5


def score_destinations(
    destinations: Sequence[Destination],
    preferences: Iterable[str] | None = None,
) -> List[ScoredDestination]:
    """Return one ``ScoredDestination`` per input, in input order.

    Distance and time terms are normalised against the maxima of *this*
    candidate set, so scores are only comparable within a single run.
    """
    if not destinations:
        return []

    prefs = _clean_preferences(preferences)
    max_distance = max(d.distance_from_source for d in destinations)
    max_combined = max(d.combined_time for d in destinations)

    scored: List[ScoredDestination] = []
    for dest in destinations:
        breakdown = score_breakdown(dest, prefs, max_distance, max_combined)
        score = _clamp(sum(SCORE_WEIGHTS[key] * breakdown[key] for key in SCORE_WEIGHTS))
        scored.append(ScoredDestination(**dest.model_dump(), score=score))
    return scored


def score_breakdown(
    dest: Destination,
    preferences: List[str],
    max_distance: float,
    max_combined: float,
) -> Dict[str, float]:
    rating_score = dest.rating / MAX_RATING
    distance_score = 1.0 if max_distance <= 0 else 1.0 - dest.distance_from_source / max_distance
    time_score = 1.0 if max_combined <= 0 else 1.0 - dest.combined_time / max_combined
    popularity = dest.popularity if dest.popularity is not None else DEFAULT_POPULARITY
    return {
        "rating": _clamp(rating_score),
        "distance": _clamp(distance_score),
        "time": _clamp(time_score),
        "preference": preference_score(dest.category, preferences),
        "popularity": _clamp(popularity / MAX_POPULARITY),
    }


def preference_score(category: str | None, preferences: List[str]) -> float:
    """1.0 on a match, 0.3 when preferences miss, 0.5 when none were given.

    A match is case-insensitive substring containment in either direction,
    so "nature walks" matches "nature" and "cult" matches "cultural".
    """
    if not preferences:
        return PREFERENCE_NEUTRAL
    if not category:
        return PREFERENCE_MISS
    cat = category.lower()
    for pref in preferences:
        if pref in cat or cat in pref:
            return PREFERENCE_MATCH
    return PREFERENCE_MISS


def _clean_preferences(preferences: Iterable[str] | None) -> List[str]:
    if not preferences:
        return []
    return [p.strip().lower() for p in preferences if isinstance(p, str) and p.strip()]


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))
