from pinecone import Pinecone

from legalrisk.logging.logger import Log
from legalrisk.vectorindex.base import (
    BaseVectorIndex,
    MetadataValue,
    VectorEntry,
    VectorMatch,
    clamp_similarity,
    sanitize_metadata,
)
from legalrisk.vectorindex.exceptions import VectorIndexError

_UPSERT_BATCH_SIZE = 100
_MAX_TOP_K = 100


class PineconeVectorIndex(BaseVectorIndex):
    """Vector index backed by one Pinecone index and namespace.

    The index must exist and use the cosine metric with the embedding
    dimensionality the embedding client produces.
    """

    def __init__(self, *, api_key: str, index_name: str, namespace: str = "") -> None:
        if not api_key:
            raise ValueError("pinecone_api_key is required for vector_index_backend=pinecone")
        self._client = Pinecone(api_key=api_key)
        self._index = self._client.Index(index_name)
        self._namespace = namespace

    def upsert_many(self, entries: list[VectorEntry]) -> None:
        for i in range(0, len(entries), _UPSERT_BATCH_SIZE):
            batch = entries[i : i + _UPSERT_BATCH_SIZE]
            vectors = [
                {"id": entry.id, "values": entry.vector, "metadata": entry.metadata}
                for entry in batch
            ]
            try:
                self._index.upsert(vectors=vectors, namespace=self._namespace)
            except Exception as exc:
                raise VectorIndexError(f"Pinecone upsert failed: {exc}") from exc
            Log.debug(f"Pinecone upsert: {len(batch)} vectors")

    def query(
        self,
        vector: list[float],
        top_k: int,
        metadata_filter: dict[str, MetadataValue],
    ) -> list[VectorMatch]:
        try:
            response = self._index.query(
                vector=vector,
                top_k=min(top_k, _MAX_TOP_K),
                filter=self._build_filter(metadata_filter),
                include_metadata=True,
                include_values=False,
                namespace=self._namespace,
            )
        except Exception as exc:
            raise VectorIndexError(f"Pinecone query failed: {exc}") from exc

        matches = response.matches or []
        return [
            VectorMatch(
                id=match.id,
                similarity=clamp_similarity(match.score),
                metadata=dict(match.metadata or {}),
            )
            for match in matches
        ]

    def update_metadata(self, entry_id: str, metadata: dict[str, object]) -> None:
        try:
            self._index.update(
                id=entry_id,
                set_metadata=sanitize_metadata(metadata),
                namespace=self._namespace,
            )
        except Exception as exc:
            raise VectorIndexError(f"Pinecone metadata update failed: {exc}") from exc

    @staticmethod
    def _build_filter(metadata_filter: dict[str, MetadataValue]) -> dict[str, object] | None:
        clauses = [{key: {"$eq": value}} for key, value in metadata_filter.items()]
        if not clauses:
            return None
        if len(clauses) == 1:
            return clauses[0]
        return {"$and": clauses}
