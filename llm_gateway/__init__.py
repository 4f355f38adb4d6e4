from __future__ import annotations  # Re-export llm_gateway public API

from .llm_gateway import (
    GatewayTimeout,
    HttpClient,
    HttpResponse,
    LlmGatewayError,
    RateLimitedError,
    call,
    chat,
    complete,
)
from .throttle import FixedIntervalThrottle

__all__ = [
    "FixedIntervalThrottle",
    "GatewayTimeout",
    "HttpClient",
    "HttpResponse",
    "LlmGatewayError",
    "RateLimitedError",
    "call",
    "chat",
    "complete",
]
