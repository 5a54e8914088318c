from __future__ import annotations  # Re-export llm_gateway public API

from .assist import Assistant, BoundedAssist, ExternalAssistUnavailable, LlmAssistant
from .llm_gateway import HttpClient, HttpResponse, LlmGatewayError, call, chat, strip_code_fences

__all__ = [
    "Assistant",
    "BoundedAssist",
    "ExternalAssistUnavailable",
    "LlmAssistant",
    "HttpClient",
    "HttpResponse",
    "LlmGatewayError",
    "call",
    "chat",
    "strip_code_fences",
]
