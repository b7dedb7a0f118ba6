from legalrisk.analysis.analyzer import Analyzer
from legalrisk.analysis.base import BaseAnalyzer
from legalrisk.analysis.example_client_adapter import ExampleClientAdapter
from legalrisk.analysis.openai_client_adapter import OpenAIClientAdapter
from legalrisk.config.settings import Settings


class AnalyzerFactory:
    """Creates the configured analyzer."""

    PROVIDERS = ("openai", "openai_compatible", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseAnalyzer:
        """Create a configured analyzer from application settings."""
        provider = settings.analysis_provider.lower()
        if provider == "example":
            return Analyzer(
                client=ExampleClientAdapter(),
                model="example",
                temperature=0.0,
                max_chars=settings.analysis_max_chars,
            )
        if provider not in cls.PROVIDERS:
            raise ValueError(
                f"Unknown analysis provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        client = OpenAIClientAdapter(
            api_key=settings.openai_api_key,
            timeout_seconds=settings.analysis_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return Analyzer(
            client=client,
            model=settings.analysis_model_name,
            temperature=settings.analysis_temperature,
            max_tokens=settings.analysis_max_tokens,
            max_chars=settings.analysis_max_chars,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        url = settings.openai_compatible_base_url.strip()
        if not url:
            raise ValueError(
                "openai_compatible_base_url is required for analysis_provider=openai_compatible"
            )
        return url
