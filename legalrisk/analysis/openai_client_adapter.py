import httpx
import openai

from legalrisk.analysis.client_base import BaseAnalysisClient
from legalrisk.analysis.exceptions import (
    AnalysisError,
    AnalysisNetworkError,
    AnalysisUnavailableError,
)


class OpenAIClientAdapter(BaseAnalysisClient):
    """Analysis client adapter built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._has_key = bool(api_key)
        self._client = openai.OpenAI(
            api_key=api_key or "missing",
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=1,
        )

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
        if not self._has_key:
            raise AnalysisUnavailableError("AI provider API key is not configured")
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "legal_risk_analysis",
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except openai.AuthenticationError as exc:
            raise AnalysisUnavailableError(f"AI provider rejected credentials: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise AnalysisNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise AnalysisNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise AnalysisError("AI returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise AnalysisError("AI returned empty response")
        return content

    def close(self) -> None:
        self._client.close()
