"""Environment-driven settings for the travel assistant."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass(frozen=True)
class Settings:
    gateway_api_key: Optional[str]
    gateway_base_url: Optional[str]
    text_model: str = "gpt-4o-mini"
    vision_model: str = "gpt-4o-mini"
    allowed_origins: tuple = ("*",)
    http_timeout: float = 10.0
    wikipedia_enabled: bool = True

    @property
    def gateway_configured(self) -> bool:
        return bool(self.gateway_api_key)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _split_origins(raw: str | None) -> List[str]:
    origins = [origin.strip() for origin in (raw or "*").split(",") if origin.strip()]
    return origins or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings once; call ``get_settings.cache_clear()`` after changing the env."""
    return Settings(
        gateway_api_key=os.getenv("AI_GATEWAY_API_KEY") or os.getenv("OPENAI_API_KEY") or None,
        gateway_base_url=os.getenv("AI_GATEWAY_BASE_URL") or None,
        text_model=os.getenv("TRAVEL_ASSISTANT_TEXT_MODEL") or "gpt-4o-mini",
        vision_model=os.getenv("TRAVEL_ASSISTANT_VISION_MODEL") or "gpt-4o-mini",
        allowed_origins=tuple(_split_origins(os.getenv("TRAVEL_ASSISTANT_ALLOWED_ORIGINS"))),
        http_timeout=_env_float("TRAVEL_ASSISTANT_HTTP_TIMEOUT", 10.0),
        wikipedia_enabled=_env_flag("TRAVEL_ASSISTANT_WIKIPEDIA", True),
    )
