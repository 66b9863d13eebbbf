from __future__ import annotations

import logging
import os
from typing import Any, Dict, Type, TypeVar

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from travel_assistant import llm
from travel_assistant.config import get_settings
from travel_assistant.errors import TravelAssistantError, ValidationError
from travel_assistant.landmarks import analyze_landmark
from travel_assistant.optimizer import format_location, optimize_trip, validation_error_from
from travel_assistant.recommender import plan_recommended_trip
from travel_assistant.schemas import LandmarkRequest, TextQueryRequest, TextQueryResponse

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("TRAVEL_ASSISTANT_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False

ModelT = TypeVar("ModelT", bound=BaseModel)

app = FastAPI(title="Travel Assistant API")

# Browser clients call these endpoints directly, so CORS mirrors the
# permissive headers of the hosted functions unless
# TRAVEL_ASSISTANT_ALLOWED_ORIGINS narrows it.
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.exception_handler(TravelAssistantError)
async def travel_assistant_error_handler(request: Request, exc: TravelAssistantError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        logger.info("Rejected %s: %s", request.url.path, exc.message)
    else:
        logger.warning("%s failed with %s", request.url.path, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    loc = tuple(errors[0].get("loc", ())) if errors else ()
    if loc and loc[0] == "body":
        loc = loc[1:]
    field = format_location(loc)
    msg = errors[0].get("msg", "invalid value") if errors else "invalid value"
    err = ValidationError(field, f"{field}: {msg}")
    return JSONResponse(status_code=err.status_code, content=err.to_payload())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content=TravelAssistantError().to_payload())


def _validate(model: Type[ModelT], payload: Dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise validation_error_from(exc) from exc


@app.get("/health")
async def health() -> Dict[str, Any]:
    return {"status": "ok", "gateway": "configured" if get_settings().gateway_configured else "placeholder"}


@app.post("/optimize-trip")
async def api_optimize_trip(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    """Plan a visit order for caller-supplied destinations."""
    plan = optimize_trip(payload)
    return plan.model_dump(mode="json", by_alias=True)


@app.post("/optimize-trip/recommended")
def api_optimize_recommended(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    """Plan a trip from recommender-supplied candidates."""
    plan = plan_recommended_trip(payload)
    return plan.model_dump(mode="json", by_alias=True)


@app.post("/analyze-landmark")
async def api_analyze_landmark(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    req = _validate(LandmarkRequest, payload)
    info = await analyze_landmark(req)
    return info.model_dump(mode="json")


@app.post("/handle-text-query")
def api_handle_text_query(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    req = _validate(TextQueryRequest, payload)
    answer = llm.answer_text_query(req.query)
    return TextQueryResponse(response=answer).model_dump()
