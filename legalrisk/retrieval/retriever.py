from legalrisk.embedding.base import BaseEmbeddingClient
from legalrisk.embedding.exceptions import EmbeddingError
from legalrisk.logging.logger import Log
from legalrisk.retrieval.exceptions import RetrievalError
from legalrisk.retrieval.indexer import CLAUSE_ENTRY, DOCUMENT_ENTRY
from legalrisk.vectorindex.base import BaseVectorIndex, MetadataValue, VectorMatch
from legalrisk.vectorindex.exceptions import VectorIndexError


class ContextRetriever:
    """Finds an owner's prior documents and clauses most similar to a text.

    Lookups never raise: similarity context is an enhancement, so any
    embedding or index failure yields an empty list.
    """

    def __init__(self, embedding_client: BaseEmbeddingClient, vector_index: BaseVectorIndex) -> None:
        self._embedding_client = embedding_client
        self._vector_index = vector_index

    def find_similar(
        self,
        text: str,
        owner_id: int,
        top_k: int,
        exclude_id: int | None = None,
    ) -> list[VectorMatch]:
        """Top-K prior documents of the same owner, best match first.

        `exclude_id` drops the document being processed, whose own vector may
        already be in the index.
        """
        metadata_filter: dict[str, MetadataValue] = {
            "owner_id": str(owner_id),
            "entry_type": DOCUMENT_ENTRY,
        }
        fetch_k = top_k + 1 if exclude_id is not None else top_k
        try:
            matches = self._query(text, fetch_k, metadata_filter)
        except RetrievalError as exc:
            Log.warning(f"Similar document lookup failed for owner {owner_id}: {exc}")
            return []
        if exclude_id is not None:
            matches = [m for m in matches if m.id != str(exclude_id)]
        return matches[:top_k]

    def find_similar_clauses(
        self,
        clause_text: str,
        clause_type: str,
        owner_id: int,
        top_k: int = 5,
    ) -> list[VectorMatch]:
        metadata_filter: dict[str, MetadataValue] = {
            "owner_id": str(owner_id),
            "entry_type": CLAUSE_ENTRY,
            "clause_type": clause_type,
        }
        try:
            return self._query(clause_text, top_k, metadata_filter)
        except RetrievalError as exc:
            Log.warning(f"Similar clause lookup failed for owner {owner_id}: {exc}")
            return []

    def _query(
        self, text: str, top_k: int, metadata_filter: dict[str, MetadataValue]
    ) -> list[VectorMatch]:
        if top_k <= 0:
            return []
        try:
            vector = self._embedding_client.embed(text)
            return self._vector_index.query(vector, top_k, metadata_filter)
        except (EmbeddingError, VectorIndexError) as exc:
            raise RetrievalError(str(exc)) from exc
