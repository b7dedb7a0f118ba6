"""AI-powered legal risk analyzer."""

import json
from datetime import datetime
from pathlib import Path

from legalrisk.analysis.base import BaseAnalyzer
from legalrisk.analysis.client_base import BaseAnalysisClient
from legalrisk.analysis.exceptions import AnalysisError, AnalysisUnavailableError
from legalrisk.analysis.fallback import fallback_analysis
from legalrisk.analysis.models import AnalysisResult
from legalrisk.analysis.prompt_loader import load_json_schema, load_prompt_template
from legalrisk.analysis.validator import parse_json_object, validate_and_build
from legalrisk.logging.logger import Log
from legalrisk.vectorindex.base import VectorMatch

DEFAULT_SYSTEM_PROMPT = (
    "You are a legal document analysis expert. Always respond with valid JSON only."
)

_BASELINE_CONTEXT = (
    "CONTEXT: This appears to be the first document of this type for this owner, "
    "so provide a thorough baseline analysis."
)


class Analyzer(BaseAnalyzer):
    """Analyzes legal text with a reasoning model, using similar prior documents as context."""

    def __init__(
        self,
        *,
        client: BaseAnalysisClient,
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 2500,
        max_chars: int = 6000,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._max_tokens = max_tokens
        self._max_chars = max_chars
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)
        schema_str = load_json_schema(json_schema_path)
        self._json_schema = schema_str
        self._json_schema_dict = json.loads(schema_str)

    def analyze(self, text: str, similar_documents: list[VectorMatch]) -> AnalysisResult:
        """Return a validated analysis, or the fallback on any model/parse failure."""
        prompt = self.build_prompt(text, similar_documents)
        Log.debug(f"Analysis prompt:\n{prompt}")

        try:
            raw_response = self._call_ai(prompt)
            Log.debug(f"AI raw response:\n{raw_response}")
            result = validate_and_build(parse_json_object(raw_response))
        except AnalysisUnavailableError:
            raise
        except AnalysisError as exc:
            Log.warning(f"Analysis failed, using fallback: {exc}")
            return fallback_analysis()

        Log.info(
            f"Analysis complete: risk score {result.risk_score}, "
            f"{len(result.risk_factors)} risk factors, {len(result.clauses)} clauses"
        )
        return result

    def build_prompt(self, text: str, similar_documents: list[VectorMatch]) -> str:
        return self._prompt_template.format(
            context_block=self._build_context_block(similar_documents),
            json_schema=self._json_schema,
            document_text=text[: self._max_chars],
        )

    def close(self) -> None:
        self._client.close()

    @staticmethod
    def _build_context_block(similar_documents: list[VectorMatch]) -> str:
        if not similar_documents:
            return _BASELINE_CONTEXT

        lines = [
            f"CONTEXT: This owner has {len(similar_documents)} similar documents "
            "analyzed before:",
            "",
        ]
        for i, match in enumerate(similar_documents, start=1):
            meta = match.metadata
            key_issues = meta.get("key_issues") or []
            issues = ", ".join(str(issue) for issue in key_issues) or "None recorded"
            risk_score = meta.get("risk_score")
            lines.extend(
                [
                    f"Similar Document {i} ({round(match.similarity * 100)}% similar):",
                    f"- Type: {meta.get('document_type') or 'Unknown'}",
                    f"- File: {meta.get('file_name') or 'Unknown'}",
                    f"- Risk Score: {risk_score if risk_score is not None else 'Not analyzed'}",
                    f"- Key Issues: {issues}",
                    f"- Date: {_format_date(meta.get('created_at'))}",
                    "",
                ]
            )
        lines.extend(
            [
                "IMPORTANT:",
                "- Compare this document to the similar ones above.",
                '- Name specific comparisons, e.g. "Unlike Document 1, which had X, '
                'this document...".',
                "- Point out recurring patterns across the owner's documents.",
                "- Be more specific than a baseline analysis would be.",
            ]
        )
        return "\n".join(lines)

    def _call_ai(self, prompt: str) -> str:
        return self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema_dict,
        )


def _format_date(raw: object) -> str:
    if not isinstance(raw, str) or not raw:
        return "Unknown"
    try:
        return datetime.fromisoformat(raw).date().isoformat()
    except ValueError:
        return raw
