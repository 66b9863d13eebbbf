from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote
import logging
import os

import httpx

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("TRAVEL_ASSISTANT_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False

@dataclass
class PageSummary:
    title: str
    extract: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    url: Optional[str] = None

class WikipediaClient:
    """
    Looks up a page summary (intro text + coordinates) by title.
    """
    SUMMARY_ENDPOINT = "https://{lang}.wikipedia.org/api/rest_v1/page/summary/{title}"

    def __init__(self, *, language: str = "en", timeout: float = 10.0):
        self.language = language or "en"
        self.timeout = timeout

    async def summary(self, title: str) -> Optional[PageSummary]:
        """Return the page summary for ``title`` or ``None`` when unavailable.

        Lookups are best effort: a missing page, a network failure or an
        unexpected payload all yield ``None`` so callers can keep the data
        they already have.
        """
        if not title or not title.strip():
            return None
        url = self.SUMMARY_ENDPOINT.format(lang=self.language, title=quote(title.strip().replace(" ", "_")))
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                r = await client.get(url, headers={"User-Agent": "travel-assistant/1.0"})
                if r.status_code == 404:
                    logger.info("No Wikipedia page for %s", title)
                    return None
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError):
            logger.warning("Failed to fetch Wikipedia summary for %s", title, exc_info=True)
            return None

        if not isinstance(data, dict) or data.get("type") == "disambiguation":
            return None
        coords = data.get("coordinates") or {}
        page_url = ((data.get("content_urls") or {}).get("desktop") or {}).get("page")
        return PageSummary(
            title=data.get("title") or title,
            extract=(data.get("extract") or "").strip(),
            lat=coords.get("lat"),
            lng=coords.get("lon"),
            url=page_url,
        )
