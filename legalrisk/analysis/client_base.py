from abc import ABC, abstractmethod


class BaseAnalysisClient(ABC):
    """Contract for provider-specific reasoning-model clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        """Return provider response as plain text."""

    def close(self) -> None:
        """Release underlying connections. No-op by default."""
