# travel_assistant/llm.py
import json
import logging
import os
import re
from typing import Any, Dict, List, Optional

import openai
from openai import OpenAI

from travel_assistant.config import get_settings
from travel_assistant.errors import (
    GatewayNotConfiguredError,
    QuotaExceededError,
    RateLimitedError,
    UpstreamError,
    UpstreamResponseError,
)
from travel_assistant.schemas import CATEGORIES, Coordinates, LandmarkInfo

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("TRAVEL_ASSISTANT_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False

_settings = get_settings()
if _settings.gateway_configured:
    _client: Optional[OpenAI] = OpenAI(
        api_key=_settings.gateway_api_key,
        base_url=_settings.gateway_base_url,
        timeout=_settings.http_timeout * 3,
        max_retries=0,
    )
else:  # pragma: no cover - exercised indirectly in tests without API key
    _client = None
    logger.warning("AI_GATEWAY_API_KEY not set; landmark and text endpoints will serve placeholders")

LANDMARK_SYSTEM = """You are an expert tour guide who recognises landmarks from photos.
Identify the landmark in the image and respond ONLY with JSON:
  {"name": str, "summary": str, "coordinates": {"lat": float, "lng": float}, "fun_facts": [str]}
- summary: 2-3 sentences of history and significance.
- fun_facts: exactly 3 short, surprising facts.
If no landmark is recognisable, set name to "Unknown landmark", explain in summary,
set coordinates to null and leave fun_facts empty.
"""

TEXT_QUERY_SYSTEM = """You are a friendly, knowledgeable travel guide.
Answer questions about landmarks, cities and travel in 3-5 concise sentences.
If the question is not travel related, answer briefly and steer back to travel.
"""

RECOMMENDER_SYSTEM = """You are a local travel expert planning a short outing.
Respond ONLY with JSON of the form {{"destinations": [...]}}. Each destination has:
  name (str), visitTime (minutes), travelTimeFromSource (minutes from the start location),
  distanceFromSource (km from the start location), distanceToSource (km to the HOME address),
  rating (0-5), category (one of: {categories}), popularity (1-10).
Use realistic estimates; never invent places that do not exist.
"""

RECOMMENDER_TEMPLATE = """Trip context:
- start location: {start}
- home address: {home}
- available time: {hours} hours
- interests: {interests}

Suggest {count} candidate places worth visiting.
"""

PLACEHOLDER_LANDMARK: Dict[str, Any] = {
    "name": "Eiffel Tower",
    "summary": (
        "The Eiffel Tower is a wrought-iron lattice tower on the Champ de Mars in Paris, France. "
        "It is named after the engineer Gustave Eiffel, whose company designed and built the tower "
        "from 1887 to 1889."
    ),
    "coordinates": {"lat": 48.8584, "lng": 2.2945},
    "fun_facts": [
        "The tower was the main exhibit of the 1889 Exposition Universelle (World's Fair).",
        "It is repainted every seven years, a process that requires 60 tons of paint.",
        "The tower's height changes by up to 15 cm (6 in) due to temperature fluctuations.",
    ],
}

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def identify_landmark(image: str, language: Optional[str] = None, model: Optional[str] = None) -> LandmarkInfo:
    """Ask the multimodal model which landmark the image shows."""
    if _client is None:
        logger.info("Skipping landmark call; returning placeholder payload (missing client or API key).")
        return LandmarkInfo.model_validate(PLACEHOLDER_LANDMARK)

    model = model or get_settings().vision_model
    instruction = "Identify this landmark."
    if language:
        instruction += f" Write summary and fun_facts in {language}."
    messages = [
        {"role": "system", "content": LANDMARK_SYSTEM},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": instruction},
                {"type": "image_url", "image_url": {"url": _as_data_url(image)}},
            ],
        },
    ]
    logger.info("Invoking vision model %s for landmark identification", model)
    parsed = _parse_json(_complete(messages, model=model, json_mode=True))
    return _normalise_landmark(parsed)


def answer_text_query(query: str, model: Optional[str] = None) -> str:
    if _client is None:
        logger.info("Skipping text query; returning placeholder reply (missing client or API key).")
        return (
            f'This is a placeholder response for your query: "{query}". '
            "The real AI endpoint is not yet connected."
        )

    model = model or get_settings().text_model
    messages = [
        {"role": "system", "content": TEXT_QUERY_SYSTEM},
        {"role": "user", "content": query},
    ]
    logger.info("Invoking model %s for text query (%d chars)", model, len(query))
    answer = _complete(messages, model=model, json_mode=False).strip()
    if not answer:
        raise UpstreamResponseError()
    return answer


def recommend_destinations(
    start_location: str,
    home_address: str,
    available_hours: float,
    interests: List[str],
    *,
    count: int = 8,
    model: Optional[str] = None,
) -> List[Any]:
    """Return raw Destination-shaped records; callers validate each entry."""
    if _client is None:
        raise GatewayNotConfiguredError()

    model = model or get_settings().text_model
    messages = [
        {"role": "system", "content": RECOMMENDER_SYSTEM.format(categories=", ".join(CATEGORIES))},
        {
            "role": "user",
            "content": RECOMMENDER_TEMPLATE.format(
                start=start_location,
                home=home_address,
                hours=available_hours,
                interests=", ".join(interests) if interests else "none stated",
                count=count,
            ),
        },
    ]
    logger.info("Invoking model %s for destination recommendations near %s", model, start_location)
    parsed = _parse_json(_complete(messages, model=model, json_mode=True))

    if isinstance(parsed, list):
        records = parsed
    elif isinstance(parsed, dict) and isinstance(parsed.get("destinations"), list):
        records = parsed["destinations"]
    else:
        logger.warning("Recommender payload missing a destinations array")
        raise UpstreamResponseError()
    logger.info("Recommender returned %d candidate record(s)", len(records))
    return records


def _complete(messages: List[Dict[str, Any]], *, model: str, json_mode: bool) -> str:
    """Run one chat completion, mapping SDK failures onto typed upstream errors."""
    kwargs: Dict[str, Any] = {"model": model, "messages": messages, "temperature": 0.2}
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}
    try:
        resp = _client.chat.completions.create(**kwargs)
    except openai.RateLimitError as exc:
        if getattr(exc, "code", None) == "insufficient_quota":
            logger.warning("AI gateway quota exhausted (model %s)", model)
            raise QuotaExceededError() from exc
        logger.warning("AI gateway rate limited the request (model %s)", model)
        raise RateLimitedError() from exc
    except openai.APIStatusError as exc:
        if exc.status_code == 402:
            logger.warning("AI gateway requires payment (model %s)", model)
            raise QuotaExceededError() from exc
        logger.warning("AI gateway returned HTTP %s (model %s)", exc.status_code, model)
        raise UpstreamError() from exc
    except openai.APIError as exc:
        logger.warning("AI gateway call failed (model %s)", model, exc_info=True)
        raise UpstreamError() from exc

    try:
        content = resp.choices[0].message.content
    except (AttributeError, IndexError) as exc:
        raise UpstreamResponseError() from exc
    return content or ""


def _parse_json(raw: str) -> Any:
    text = (raw or "").strip()
    match = _FENCE_RE.match(text)
    if match:
        text = match.group(1)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Model response was not valid JSON (%d chars)", len(text))
        raise UpstreamResponseError() from exc


def _normalise_landmark(parsed: Any) -> LandmarkInfo:
    if not isinstance(parsed, dict):
        raise UpstreamResponseError()
    name = parsed.get("name")
    if not isinstance(name, str) or not name.strip():
        raise UpstreamResponseError()

    coords = parsed.get("coordinates")
    coordinates = None
    if isinstance(coords, dict):
        lat, lng = coords.get("lat"), coords.get("lng", coords.get("lon"))
        if isinstance(lat, (int, float)) and isinstance(lng, (int, float)):
            coordinates = Coordinates(lat=lat, lng=lng)

    facts = parsed.get("fun_facts") or parsed.get("funFacts") or []
    summary = parsed.get("summary")
    return LandmarkInfo(
        name=name.strip(),
        summary=summary.strip() if isinstance(summary, str) else "",
        coordinates=coordinates,
        fun_facts=[fact for fact in facts if isinstance(fact, str)][:5] if isinstance(facts, list) else [],
    )


def _as_data_url(image: str) -> str:
    if image.startswith("data:") or image.startswith("http://") or image.startswith("https://"):
        return image
    return f"data:image/jpeg;base64,{image}"
