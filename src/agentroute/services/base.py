"""
Abstract service interfaces consumed by the semantic matcher and router.

Implementations wrap transport failures in
:class:`~agentroute.errors.ExternalServiceError`; callers decide whether
that is fatal.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class EmbeddingService(ABC):
    """Turns text into a dense vector."""

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        ...


class CompletionService(ABC):
    """Single-turn text completion."""

    @abstractmethod
    async def complete(self, prompt: str, json_mode: bool = False) -> str:
        """Return the model's reply. With ``json_mode`` the reply must be a JSON object."""
        ...
