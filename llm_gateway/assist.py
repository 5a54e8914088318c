"""Bounded external-assist calls with a soft failure contract.

Scoring and summarization may ask an external model for help, but the engine
must never wait on it indefinitely or fail because of it.  ``BoundedAssist``
runs an assistant under a hard wall-clock deadline and folds every failure
mode (transport, status, malformed JSON, schema mismatch, timeout) into
``ExternalAssistUnavailable`` so callers can fall back to their local path.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Optional, Protocol, Type, TypeVar

from pydantic import BaseModel, ValidationError

from config import LlmRoute

from .llm_gateway import HttpClient, LlmGatewayError, call

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ExternalAssistUnavailable(LlmGatewayError):
    """Soft failure: the external assistant could not produce a usable reply."""


class Assistant(Protocol):
    def complete(self, prompt: str, schema: Type[T]) -> T: ...


class LlmAssistant:
    """Assistant backed by a configured chat-completions route."""

    def __init__(self, route: LlmRoute, *, client: Optional[HttpClient] = None) -> None:
        self.route = route
        self._client = client
        self._lock = threading.Lock()

    def complete(self, prompt: str, schema: Type[T]) -> T:
        return call(
            prompt,
            schema,
            cfg=self.route,
            client=self._client,
            options={"temperature": 0.0},
            lock=self._lock,
        )


class BoundedAssist:
    """Runs an assistant on a worker thread and stops waiting after ``timeout_s``.

    A call that overruns keeps its worker busy until the transport gives up,
    but the caller continues immediately on its fallback path.
    """

    def __init__(self, assistant: Assistant, *, timeout_s: float, max_workers: int = 4) -> None:
        self.assistant = assistant
        self.timeout_s = timeout_s
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="assist")

    def call(self, prompt: str, schema: Type[T], *, purpose: str) -> T:
        future = self._executor.submit(self.assistant.complete, prompt, schema)
        try:
            result = future.result(timeout=self.timeout_s)
        except FutureTimeout as exc:
            future.cancel()
            logger.warning("External assist timed out purpose=%s timeout_s=%.1f", purpose, self.timeout_s)
            raise ExternalAssistUnavailable(f"{purpose} timed out after {self.timeout_s}s") from exc
        except (LlmGatewayError, ValidationError, ValueError) as exc:
            logger.warning("External assist failed purpose=%s: %s", purpose, exc)
            raise ExternalAssistUnavailable(f"{purpose} failed: {exc}") from exc
        except Exception as exc:  # noqa: BLE001
            logger.warning("External assist raised unexpectedly purpose=%s: %r", purpose, exc)
            raise ExternalAssistUnavailable(f"{purpose} failed: {exc}") from exc
        if not isinstance(result, schema):
            try:
                result = schema.model_validate(result)
            except ValidationError as exc:
                logger.warning("External assist returned unexpected shape purpose=%s: %s", purpose, exc)
                raise ExternalAssistUnavailable(f"{purpose} returned an invalid payload") from exc
        return result

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)


__all__ = ["Assistant", "BoundedAssist", "ExternalAssistUnavailable", "LlmAssistant"]
