"""Decodes the model's JSON into an AnalysisResult.

Structural problems (wrong container types, missing risk score or
summaries) raise AnalysisValidationError. Out-of-range values are coerced:
the risk score is clamped into [0, 100], unknown clause types become OTHER,
and unknown severities or priorities become MEDIUM.
"""

import json
import math
from typing import Any

from legalrisk.analysis.exceptions import AnalysisValidationError
from legalrisk.analysis.models import (
    AnalysisResult,
    Clause,
    ClausePosition,
    ClauseType,
    Priority,
    Recommendation,
    RiskFactor,
    Severity,
)

MIN_RISK_SCORE = 0
MAX_RISK_SCORE = 100


def parse_json_object(raw: str) -> dict[str, Any]:
    """Parse a model response, tolerating a surrounding markdown code fence."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    if not cleaned:
        raise AnalysisValidationError("Empty response")
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise AnalysisValidationError(f"Invalid JSON response: {exc}") from exc

    if not isinstance(parsed, dict):
        raise AnalysisValidationError("JSON response must be an object")
    return parsed


def validate_and_build(data: dict[str, Any]) -> AnalysisResult:
    """Validate parsed JSON and build an AnalysisResult.

    Raises:
        AnalysisValidationError: on any structural failure.
    """
    return AnalysisResult(
        risk_score=_build_risk_score(data.get("riskScore")),
        overall_summary=_require_string(data, "overallSummary"),
        plain_english=_require_string(data, "plainEnglish"),
        key_terms=_build_key_terms(data.get("keyTerms")),
        risk_factors=[
            _build_risk_factor(item, i)
            for i, item in enumerate(_require_list(data, "riskFactors"))
        ],
        recommendations=[
            _build_recommendation(item, i)
            for i, item in enumerate(_require_list(data, "recommendations"))
        ],
        clauses=[
            _build_clause(item, i) for i, item in enumerate(_require_list(data, "clauses"))
        ],
    )


def _build_risk_score(raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise AnalysisValidationError(f"'riskScore' must be a number, got {raw!r}")
    if not math.isfinite(raw):
        raise AnalysisValidationError(f"'riskScore' must be finite, got {raw!r}")
    return max(MIN_RISK_SCORE, min(MAX_RISK_SCORE, round(raw)))


def _require_string(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise AnalysisValidationError(f"'{key}' must be a string")
    return value


def _require_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise AnalysisValidationError(f"'{key}' must be a list")
    return value


def _build_key_terms(raw: Any) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise AnalysisValidationError("'keyTerms' must be a list")
    return [term for term in raw if isinstance(term, str) and term.strip()]


def _string_field(raw: dict[str, Any], key: str, where: str) -> str:
    value = raw.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise AnalysisValidationError(f"{where}: '{key}' must be a string")
    return value


def _coerce_severity(raw: Any) -> Severity:
    if isinstance(raw, str):
        try:
            return Severity(raw.strip().upper())
        except ValueError:
            pass
    return Severity.MEDIUM


def _coerce_priority(raw: Any) -> Priority:
    if isinstance(raw, str):
        try:
            return Priority(raw.strip().upper())
        except ValueError:
            pass
    return Priority.MEDIUM


def _require_object(raw: Any, where: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise AnalysisValidationError(f"{where} must be an object")
    return raw


def _build_risk_factor(raw: Any, index: int) -> RiskFactor:
    where = f"Risk factor at index {index}"
    item = _require_object(raw, where)
    return RiskFactor(
        factor=_string_field(item, "factor", where),
        severity=_coerce_severity(item.get("severity")),
        explanation=_string_field(item, "explanation", where),
    )


def _build_recommendation(raw: Any, index: int) -> Recommendation:
    where = f"Recommendation at index {index}"
    item = _require_object(raw, where)
    return Recommendation(
        category=_string_field(item, "category", where),
        suggestion=_string_field(item, "suggestion", where),
        priority=_coerce_priority(item.get("priority")),
    )


def _build_clause(raw: Any, index: int) -> Clause:
    where = f"Clause at index {index}"
    item = _require_object(raw, where)
    suggestions = item.get("suggestions") or []
    if not isinstance(suggestions, list):
        raise AnalysisValidationError(f"{where}: 'suggestions' must be a list")
    return Clause(
        type=ClauseType.coerce(item.get("type")),
        content=_string_field(item, "content", where),
        risk_level=_coerce_severity(item.get("riskLevel")),
        explanation=_string_field(item, "explanation", where),
        suggestions=[s for s in suggestions if isinstance(s, str)],
        position=_build_position(item.get("position")),
    )


def _build_position(raw: Any) -> ClausePosition:
    if not isinstance(raw, dict):
        return ClausePosition()
    page = raw.get("page")
    section = raw.get("section")
    return ClausePosition(
        page=int(page) if _is_finite_number(page) else 0,
        section=section if isinstance(section, str) and section else "N/A",
    )


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )
