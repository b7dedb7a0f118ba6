from legalrisk.config.settings import Settings
from legalrisk.vectorindex.base import BaseVectorIndex
from legalrisk.vectorindex.memory_index import InMemoryVectorIndex


class VectorIndexFactory:
    """Creates the configured vector index backend."""

    BACKENDS = ("pinecone", "memory")

    @classmethod
    def create(cls, settings: Settings) -> BaseVectorIndex:
        backend = settings.vector_index_backend.lower()
        if backend == "memory":
            return InMemoryVectorIndex()
        if backend == "pinecone":
            from legalrisk.vectorindex.pinecone_index import PineconeVectorIndex

            return PineconeVectorIndex(
                api_key=settings.pinecone_api_key,
                index_name=settings.pinecone_index_name,
                namespace=settings.pinecone_namespace,
            )
        raise ValueError(
            f"Unknown vector index backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
