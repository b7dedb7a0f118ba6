class EmbeddingError(Exception):
    """Base exception for embedding generation."""


class EmbeddingUnavailableError(EmbeddingError):
    """Raised when the embedding provider cannot be reached or rejects the call."""
