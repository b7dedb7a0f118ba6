class VectorIndexError(Exception):
    """Raised when the vector index rejects or fails an operation."""
