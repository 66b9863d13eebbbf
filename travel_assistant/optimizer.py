# travel_assistant/optimizer.py
from __future__ import annotations

import os
from typing import Any, Dict, Sequence, Tuple, Type
import logging

from pydantic import ValidationError as PydanticValidationError

from travel_assistant.errors import ValidationError
from travel_assistant.planner.allocator import allocate
from travel_assistant.planner.scorer import score_destinations
from travel_assistant.planner.summary import build_summary
from travel_assistant.planner.timefmt import format_minutes
from travel_assistant.schemas import Destination, TripPlan, TripRequest

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("TRAVEL_ASSISTANT_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False


def optimize_trip(payload: TripRequest | Dict[str, Any]) -> TripPlan:
    """Validate a raw request and return the time-bounded visiting plan.

    Pure and synchronous: no I/O and no shared state, so concurrent callers
    need no coordination. Raises ``ValidationError`` before any computation
    when the request or one of its destination records is malformed.
    """
    request = parse_trip_request(payload)
    if request.destinations is None:
        raise ValidationError("destinations", "destinations: Field required")
    return build_trip_plan(request, request.destinations)


def build_trip_plan(
    request: TripRequest,
    destinations: Sequence[Destination],
    *,
    plan_cls: Type[TripPlan] = TripPlan,
    **extra: Any,
) -> TripPlan:
    """Score, allocate and summarise already-validated candidates."""
    available = request.available_minutes
    scored = score_destinations(destinations, request.user_preferences)
    allocation = allocate(scored, available)
    summary = build_summary(allocation.accepted, allocation.estimated_return_time)

    logger.info(
        "Optimised trip from %s (home %s): %d of %d stops admitted, %.1f of %.1f min remaining",
        request.start_location,
        request.home_address,
        len(allocation.accepted),
        len(scored),
        allocation.remaining_time,
        available,
    )

    return plan_cls(
        start_location=request.start_location,
        home_address=request.home_address or request.start_location,
        optimized_route=allocation.accepted,
        skipped_destinations=allocation.rejected,
        remaining_time=allocation.remaining_time,
        estimated_return_time=allocation.estimated_return_time,
        summary=summary,
        remaining_time_label=format_minutes(allocation.remaining_time),
        **extra,
    )


def parse_trip_request(payload: Any) -> TripRequest:
    if isinstance(payload, TripRequest):
        return payload
    if not isinstance(payload, dict):
        raise ValidationError("body", "Request body must be a JSON object")
    try:
        return TripRequest.model_validate(payload)
    except PydanticValidationError as exc:
        raise validation_error_from(exc) from exc


def validation_error_from(exc: PydanticValidationError) -> ValidationError:
    """Collapse pydantic's error list into the first offending field."""
    errors = exc.errors()
    if not errors:
        return ValidationError("body")
    first = errors[0]
    field = format_location(first.get("loc", ()))
    return ValidationError(field, f"{field}: {first.get('msg', 'invalid value')}")


def format_location(loc: Tuple[Any, ...] | Sequence[Any]) -> str:
    """``("destinations", 1, "visitTime")`` -> ``"destinations[1].visitTime"``."""
    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
        elif out:
            out += f".{part}"
        else:
            out = str(part)
    return out or "body"
