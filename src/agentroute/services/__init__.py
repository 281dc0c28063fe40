"""Embedding and completion service clients."""

from agentroute.services.base import CompletionService, EmbeddingService
from agentroute.services.local import HashingEmbedder
from agentroute.services.openai_compat import OpenAICompatClient

__all__ = ["CompletionService", "EmbeddingService", "HashingEmbedder", "OpenAICompatClient"]
