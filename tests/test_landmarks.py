import asyncio
import threading
from typing import Any, List

import httpx

from travel_assistant import landmarks, llm
from travel_assistant.config import get_settings
from travel_assistant.schemas import Coordinates, LandmarkInfo, LandmarkRequest
from travel_assistant.tools.wikipedia import WikipediaClient


class DummyResponse:
    def __init__(self, status_code: int, payload: Any):
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            request = httpx.Request("GET", "https://en.wikipedia.org")
            raise httpx.HTTPStatusError("boom", request=request, response=httpx.Response(self.status_code))
        return None

    def json(self):
        return self._payload


class DummyAsyncClient:
    def __init__(self, response: DummyResponse, *args, **kwargs):
        self.response = response
        self.requests: List[str] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def get(self, url, headers=None):
        self.requests.append(url)
        return self.response


SUMMARY_PAYLOAD = {
    "type": "standard",
    "title": "Alhambra",
    "extract": "The Alhambra is a palace and fortress complex in Granada.",
    "coordinates": {"lat": 37.176, "lon": -3.588},
    "content_urls": {"desktop": {"page": "https://en.wikipedia.org/wiki/Alhambra"}},
}


def _patch_http(monkeypatch, response: DummyResponse) -> List[DummyAsyncClient]:
    clients: List[DummyAsyncClient] = []

    def factory(*args, **kwargs):
        client = DummyAsyncClient(response, *args, **kwargs)
        clients.append(client)
        return client

    monkeypatch.setattr(httpx, "AsyncClient", factory)
    return clients


def test_wikipedia_summary_parses_page(monkeypatch):
    clients = _patch_http(monkeypatch, DummyResponse(200, SUMMARY_PAYLOAD))

    page = asyncio.run(WikipediaClient(language="en").summary("Alhambra palace"))

    assert page.title == "Alhambra"
    assert page.lat == 37.176 and page.lng == -3.588
    assert page.url.endswith("/wiki/Alhambra")
    assert clients[0].requests == ["https://en.wikipedia.org/api/rest_v1/page/summary/Alhambra_palace"]


def test_wikipedia_summary_is_best_effort(monkeypatch):
    _patch_http(monkeypatch, DummyResponse(404, {}))
    assert asyncio.run(WikipediaClient().summary("Nowhere")) is None

    _patch_http(monkeypatch, DummyResponse(500, {}))
    assert asyncio.run(WikipediaClient().summary("Broken")) is None

    _patch_http(monkeypatch, DummyResponse(200, {"type": "disambiguation"}))
    assert asyncio.run(WikipediaClient().summary("Mercury")) is None

    assert asyncio.run(WikipediaClient().summary("   ")) is None


def test_analyze_landmark_fills_missing_fields_from_wikipedia(monkeypatch):
    monkeypatch.setenv("TRAVEL_ASSISTANT_WIKIPEDIA", "1")
    get_settings.cache_clear()
    monkeypatch.setattr(llm, "identify_landmark", lambda image, language=None: LandmarkInfo(name="Alhambra"))
    _patch_http(monkeypatch, DummyResponse(200, SUMMARY_PAYLOAD))

    try:
        info = asyncio.run(landmarks.analyze_landmark(LandmarkRequest(image="aGVsbG8=")))
    finally:
        get_settings.cache_clear()

    assert info.summary.startswith("The Alhambra")
    assert info.coordinates == Coordinates(lat=37.176, lng=-3.588)


def test_analyze_landmark_keeps_complete_answers(monkeypatch):
    complete = LandmarkInfo(name="Big Ben", summary="Clock tower.", coordinates=Coordinates(lat=51.5, lng=-0.12))
    monkeypatch.setattr(llm, "identify_landmark", lambda image, language=None: complete)
    clients = _patch_http(monkeypatch, DummyResponse(200, SUMMARY_PAYLOAD))

    info = asyncio.run(landmarks.analyze_landmark(LandmarkRequest(image="aGVsbG8=")))

    assert info == complete
    assert clients == []


def test_wiki_language_accepts_iso_codes_only():
    assert landmarks._wiki_language("es-ES") == "es"
    assert landmarks._wiki_language("FR") == "fr"
    assert landmarks._wiki_language("Spanish") == "en"
    assert landmarks._wiki_language(None) == "en"


def test_analyze_landmark_runs_gateway_call_off_the_event_loop(monkeypatch):
    loop_thread = threading.get_ident()
    seen = []

    def identify(image, language=None):
        seen.append(threading.get_ident())
        return LandmarkInfo(name="Big Ben", summary="Clock tower.", coordinates=Coordinates(lat=51.5, lng=-0.12))

    monkeypatch.setattr(llm, "identify_landmark", identify)

    info = asyncio.run(landmarks.analyze_landmark(LandmarkRequest(image="aGVsbG8=", language="en")))

    assert info.name == "Big Ben"
    assert len(seen) == 1
    assert seen[0] != loop_thread
