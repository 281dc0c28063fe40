"""Local hashing embedder used when no embedding service is configured."""

from __future__ import annotations

import re
import zlib
from collections import Counter

import numpy as np

from agentroute.services.base import EmbeddingService

DEFAULT_DIMENSIONS = 512


class HashingEmbedder(EmbeddingService):
    """
    Term-frequency vector with tokens hashed into a fixed number of buckets.

    Deterministic across processes (crc32, not ``hash()``), so identical text
    always yields identical vectors. Vectors are L2-normalized.
    """

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS) -> None:
        if dimensions < 1:
            raise ValueError(f"dimensions must be >= 1, got {dimensions}")
        self.dimensions = dimensions

    def vectorize(self, text: str) -> np.ndarray:
        tokens = re.findall(r"\w+", text.lower())
        vector = np.zeros(self.dimensions, dtype=np.float64)
        for token, count in Counter(tokens).items():
            vector[zlib.crc32(token.encode()) % self.dimensions] += count
        norm = np.linalg.norm(vector)
        return vector / norm if norm else vector

    async def embed(self, text: str) -> list[float]:
        return self.vectorize(text).tolist()
