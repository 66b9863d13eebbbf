"""Landmark identification with optional encyclopedia enrichment."""
from __future__ import annotations

import asyncio

from travel_assistant import llm
from travel_assistant.config import get_settings
from travel_assistant.schemas import Coordinates, LandmarkInfo, LandmarkRequest
from travel_assistant.tools.wikipedia import WikipediaClient


async def analyze_landmark(request: LandmarkRequest) -> LandmarkInfo:
    settings = get_settings()
    # The gateway client is synchronous; keep it off the event loop.
    info = await asyncio.to_thread(llm.identify_landmark, request.image, language=request.language)

    if not settings.wikipedia_enabled:
        return info
    if info.summary and info.coordinates is not None:
        return info

    page = await WikipediaClient(
        language=_wiki_language(request.language),
        timeout=settings.http_timeout,
    ).summary(info.name)
    if page is None:
        return info

    updates = {}
    if not info.summary and page.extract:
        updates["summary"] = page.extract
    if info.coordinates is None and page.lat is not None and page.lng is not None:
        updates["coordinates"] = Coordinates(lat=page.lat, lng=page.lng)
    return info.model_copy(update=updates) if updates else info


def _wiki_language(language: str | None) -> str:
    # Only ISO codes like "es" or "es-ES" pick a wiki; names such as "Spanish" fall back to English.
    code = (language or "").split("-")[0].strip().lower()
    return code if len(code) == 2 and code.isalpha() else "en"
