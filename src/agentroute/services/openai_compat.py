"""
OpenAI-compatible embedding and completion client.

Works against any server exposing ``/v1/embeddings`` and
``/v1/chat/completions`` (OpenAI, vLLM, LM Studio, ...).
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from agentroute.errors import ExternalServiceError
from agentroute.services.base import CompletionService, EmbeddingService

logger = logging.getLogger(__name__)


class OpenAICompatClient(EmbeddingService, CompletionService):
    """Embedding + completion over a single OpenAI-compatible endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        embedding_model: str = "text-embedding-3-small",
        completion_model: str = "gpt-4o",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.embedding_model = embedding_model
        self.completion_model = completion_model
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _post(self, service: str, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.post(
                    f"{self.base_url}{path}", json=payload, headers=self._headers()
                )
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                service, f"HTTP {e.response.status_code} from {path}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ExternalServiceError(service, f"{type(e).__name__}: {e}") from e

    async def embed(self, text: str) -> list[float]:
        data = await self._post(
            "embedding",
            "/v1/embeddings",
            {"model": self.embedding_model, "input": text},
        )
        try:
            return [float(x) for x in data["data"][0]["embedding"]]
        except (KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError("embedding", f"malformed response: {e}") from e

    async def complete(self, prompt: str, json_mode: bool = False) -> str:
        payload: dict[str, Any] = {
            "model": self.completion_model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": 0.3,
            "max_tokens": 400,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}
        data = await self._post("completion", "/v1/chat/completions", payload)
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError("completion", f"malformed response: {e}") from e
        logger.debug("Completion returned %d chars", len(content or ""))
        return content or ""
