from legalrisk.config.settings import Settings
from legalrisk.embedding.base import BaseEmbeddingClient
from legalrisk.embedding.example_client_adapter import ExampleEmbeddingClient
from legalrisk.embedding.openai_client_adapter import OpenAIEmbeddingClient


class EmbeddingClientFactory:
    """Creates the configured embedding client."""

    PROVIDERS = ("openai", "openai_compatible", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseEmbeddingClient:
        provider = settings.embedding_provider.lower()
        if provider == "example":
            return ExampleEmbeddingClient(
                dimensions=settings.embedding_dimensions,
                max_chars=settings.embedding_max_chars,
            )
        if provider not in cls.PROVIDERS:
            raise ValueError(
                f"Unknown embedding provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        base_url = None
        if provider == "openai_compatible":
            base_url = settings.openai_compatible_base_url.strip()
            if not base_url:
                raise ValueError(
                    "openai_compatible_base_url is required for embedding_provider=openai_compatible"
                )
        return OpenAIEmbeddingClient(
            api_key=settings.openai_api_key,
            model=settings.embedding_model_name,
            dimensions=settings.embedding_dimensions,
            max_chars=settings.embedding_max_chars,
            timeout_seconds=settings.embedding_timeout_seconds,
            base_url=base_url,
        )
