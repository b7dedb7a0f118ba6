from abc import ABC, abstractmethod


class BaseEmbeddingClient(ABC):
    """Contract for provider-specific embedding clients."""

    def __init__(self, *, dimensions: int, max_chars: int) -> None:
        self._dimensions = dimensions
        self._max_chars = max_chars

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> list[float]:
        """Return a vector of length `dimensions` for the bounded text prefix.

        Raises:
            EmbeddingUnavailableError: on transport or provider errors.
        """
        return self._embed(text[: self._max_chars])

    @abstractmethod
    def _embed(self, text: str) -> list[float]:
        """Embed already-truncated text."""

    def close(self) -> None:
        """Release underlying connections. No-op by default."""
