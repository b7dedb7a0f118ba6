class RetrievalError(Exception):
    """Raised when similar-document lookup fails at the embedding or index layer."""
