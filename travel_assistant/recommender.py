"""AI-assisted trip planning: candidates come from the gateway, not the caller."""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, List, Tuple

from pydantic import ValidationError as PydanticValidationError

from travel_assistant import llm
from travel_assistant.optimizer import build_trip_plan, format_location, parse_trip_request
from travel_assistant.schemas import Destination, RecommendedTripPlan, RejectedCandidate, TripRequest

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("TRAVEL_ASSISTANT_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False


def plan_recommended_trip(payload: TripRequest | Dict[str, Any]) -> RecommendedTripPlan:
    """Fetch candidates from the recommender and optimise the well-formed ones.

    Any ``destinations`` on the request are dropped unvalidated. Upstream
    failures surface as ``UpstreamError`` subclasses from
    :mod:`travel_assistant.llm`.
    """
    if isinstance(payload, dict):
        payload = {key: value for key, value in payload.items() if key != "destinations"}
    request = parse_trip_request(payload)
    records = llm.recommend_destinations(
        request.start_location,
        request.home_address or request.start_location,
        request.available_time,
        request.user_preferences,
    )
    candidates, rejected = validate_candidates(records)
    if rejected:
        logger.warning(
            "Excluded %d malformed recommender record(s): %s",
            len(rejected),
            "; ".join(f"#{r.index} {r.field}" for r in rejected),
        )
    plan = build_trip_plan(
        request,
        candidates,
        plan_cls=RecommendedTripPlan,
        rejected_candidates=rejected,
    )
    return plan  # type: ignore[return-value]


def validate_candidates(records: Iterable[Any]) -> Tuple[List[Destination], List[RejectedCandidate]]:
    """Validate each record on its own; bad entries are reported, not fatal."""
    accepted: List[Destination] = []
    rejected: List[RejectedCandidate] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            rejected.append(
                RejectedCandidate(index=index, field="record", reason="Destination record must be an object")
            )
            continue
        try:
            accepted.append(Destination.model_validate(record))
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            name = record.get("name")
            rejected.append(
                RejectedCandidate(
                    index=index,
                    name=name if isinstance(name, str) else None,
                    field=format_location(first.get("loc", ())),
                    reason=first.get("msg", "invalid value"),
                )
            )
    return accepted, rejected
