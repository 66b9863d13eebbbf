"""Typed errors surfaced by the API with stable, documented codes."""
from __future__ import annotations

from typing import Any, Dict, Optional


class TravelAssistantError(Exception):
    code = "internal_error"
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message}


class ValidationError(TravelAssistantError):
    """Missing or invalid input; never retried."""

    code = "validation_error"
    status_code = 422
    default_message = "Invalid request"

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Invalid value for '{field}'")

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["field"] = self.field
        return payload


class UpstreamError(TravelAssistantError):
    """The AI gateway (or another remote service) failed."""

    code = "upstream_unavailable"
    status_code = 502
    default_message = "The AI service is currently unavailable. Please try again later."


class RateLimitedError(UpstreamError):
    code = "upstream_rate_limited"
    status_code = 429
    default_message = "Rate limit exceeded. Please wait a moment and try again."


class QuotaExceededError(UpstreamError):
    code = "upstream_quota_exceeded"
    status_code = 402
    default_message = "AI usage quota exhausted. Please add credits to continue."


class UpstreamResponseError(UpstreamError):
    code = "upstream_invalid_response"
    status_code = 502
    default_message = "The AI service returned an unexpected response."


class GatewayNotConfiguredError(UpstreamError):
    code = "gateway_not_configured"
    status_code = 503
    default_message = "The AI gateway is not configured."
