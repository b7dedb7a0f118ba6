"""Example analysis client adapter.

Returns a fixed, schema-valid analysis without any network call. Useful for
local development and tests, and as a template for new provider adapters:
implement BaseAnalysisClient and register the provider in AnalyzerFactory.
"""

import json
from typing import ClassVar

from legalrisk.analysis.client_base import BaseAnalysisClient


class ExampleClientAdapter(BaseAnalysisClient):
    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "riskScore": 35,
        "overallSummary": "Standard agreement with a few one-sided provisions.",
        "plainEnglish": "Mostly balanced, but check how either side can end it.",
        "keyTerms": ["term", "termination", "governing law"],
        "riskFactors": [
            {
                "factor": "Unilateral termination",
                "severity": "MEDIUM",
                "explanation": "One party may terminate without cause on short notice.",
            }
        ],
        "recommendations": [
            {
                "category": "Termination",
                "suggestion": "Negotiate a mutual notice period of at least 30 days.",
                "priority": "MEDIUM",
            }
        ],
        "clauses": [
            {
                "type": "TERMINATION",
                "content": "Either party may terminate this agreement with notice.",
                "riskLevel": "MEDIUM",
                "explanation": "Notice period is not defined.",
                "suggestions": ["Define the notice period"],
                "position": {"page": 1, "section": "Termination"},
            }
        ],
    }

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
        _ = model, temperature, max_tokens, system_prompt, user_prompt, json_schema
        return json.dumps(self.DEFAULT_RESPONSE)
