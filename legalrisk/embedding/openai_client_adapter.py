import httpx
import openai

from legalrisk.embedding.base import BaseEmbeddingClient
from legalrisk.embedding.exceptions import EmbeddingUnavailableError


class OpenAIEmbeddingClient(BaseEmbeddingClient):
    """Embedding client built on the OpenAI embeddings API."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        dimensions: int,
        max_chars: int,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        super().__init__(dimensions=dimensions, max_chars=max_chars)
        self._model = model
        self._client = openai.OpenAI(
            api_key=api_key or "missing",
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=1,
        )
        self._has_key = bool(api_key)

    def _embed(self, text: str) -> list[float]:
        if not self._has_key:
            raise EmbeddingUnavailableError("OpenAI API key is not configured")
        try:
            response = self._client.embeddings.create(
                model=self._model,
                input=text,
                dimensions=self._dimensions,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise EmbeddingUnavailableError(f"Embedding provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise EmbeddingUnavailableError(f"Embedding provider API error: {exc}") from exc

        if not response.data:
            raise EmbeddingUnavailableError("Embedding provider returned no data")
        vector = list(response.data[0].embedding)
        if len(vector) != self._dimensions:
            raise EmbeddingUnavailableError(
                f"Expected {self._dimensions} dimensions, got {len(vector)}"
            )
        return vector

    def close(self) -> None:
        self._client.close()
