"""Deterministic embedding client for local development and tests.

No network calls. Equal text maps to equal vectors, so the in-memory index
returns exact matches with similarity 1.0.
"""

import hashlib
import math

from legalrisk.embedding.base import BaseEmbeddingClient


class ExampleEmbeddingClient(BaseEmbeddingClient):
    """Hashes word tokens into a fixed number of buckets and L2-normalises."""

    def _embed(self, text: str) -> list[float]:
        vector = [0.0] * self._dimensions
        for token in text.lower().split():
            digest = hashlib.sha256(token.encode("utf-8")).digest()
            bucket = int.from_bytes(digest[:4], "big") % self._dimensions
            sign = 1.0 if digest[4] % 2 == 0 else -1.0
            vector[bucket] += sign
        norm = math.sqrt(sum(v * v for v in vector))
        if norm == 0.0:
            return vector
        return [v / norm for v in vector]
