import math
import threading

from legalrisk.vectorindex.base import (
    BaseVectorIndex,
    MetadataValue,
    VectorEntry,
    VectorMatch,
    clamp_similarity,
    sanitize_metadata,
)
from legalrisk.vectorindex.exceptions import VectorIndexError


def cosine_similarity(a: list[float], b: list[float]) -> float:
    if len(a) != len(b):
        raise VectorIndexError(f"Dimension mismatch: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if norm == 0.0:
        return 0.0
    return dot / norm


class InMemoryVectorIndex(BaseVectorIndex):
    """Exact cosine search over entries held in process memory."""

    def __init__(self) -> None:
        self._entries: dict[str, VectorEntry] = {}
        self._lock = threading.Lock()

    def upsert_many(self, entries: list[VectorEntry]) -> None:
        with self._lock:
            for entry in entries:
                self._entries[entry.id] = VectorEntry(
                    entry.id, list(entry.vector), dict(entry.metadata)
                )

    def query(
        self,
        vector: list[float],
        top_k: int,
        metadata_filter: dict[str, MetadataValue],
    ) -> list[VectorMatch]:
        with self._lock:
            candidates = [
                entry
                for entry in self._entries.values()
                if all(entry.metadata.get(key) == value for key, value in metadata_filter.items())
            ]
        scored = [
            VectorMatch(
                id=entry.id,
                similarity=clamp_similarity(cosine_similarity(vector, entry.vector)),
                metadata=dict(entry.metadata),
            )
            for entry in candidates
        ]
        scored.sort(key=lambda match: match.similarity, reverse=True)
        return scored[:top_k]

    def update_metadata(self, entry_id: str, metadata: dict[str, object]) -> None:
        with self._lock:
            entry = self._entries.get(entry_id)
            if entry is None:
                raise VectorIndexError(f"Entry {entry_id} not found")
            merged = {**entry.metadata, **sanitize_metadata(metadata)}
            self._entries[entry_id] = VectorEntry(entry.id, entry.vector, merged)

    def get(self, entry_id: str) -> VectorEntry | None:
        with self._lock:
            return self._entries.get(entry_id)
