import pytest

from legalrisk.analysis.exceptions import AnalysisValidationError
from legalrisk.analysis.models import ClauseType, Priority, Severity
from legalrisk.analysis.validator import parse_json_object, validate_and_build


def _make_payload(**overrides: object) -> dict:
    payload: dict = {
        "riskScore": 72,
        "overallSummary": "One-sided indemnity.",
        "plainEnglish": "You carry most of the risk.",
        "keyTerms": ["indemnity", "term"],
        "riskFactors": [
            {"factor": "Broad indemnity", "severity": "HIGH", "explanation": "Uncapped."}
        ],
        "recommendations": [
            {"category": "Liability", "suggestion": "Add a cap.", "priority": "HIGH"}
        ],
        "clauses": [
            {
                "type": "LIABILITY",
                "content": "Customer shall indemnify...",
                "riskLevel": "HIGH",
                "explanation": "No cap.",
                "suggestions": ["Cap at fees paid"],
                "position": {"page": 2, "section": "7.1"},
            }
        ],
    }
    payload.update(overrides)
    return payload


class TestParseJsonObject:
    def test_parses_plain_json(self) -> None:
        assert parse_json_object('{"a": 1}') == {"a": 1}

    def test_strips_markdown_fence(self) -> None:
        assert parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}

    def test_empty_response_raises(self) -> None:
        with pytest.raises(AnalysisValidationError, match="Empty"):
            parse_json_object("   ")

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(AnalysisValidationError, match="Invalid JSON"):
            parse_json_object("not json")

    def test_non_object_raises(self) -> None:
        with pytest.raises(AnalysisValidationError, match="must be an object"):
            parse_json_object("[1, 2]")


class TestValidateAndBuild:
    def test_builds_full_result(self) -> None:
        result = validate_and_build(_make_payload())

        assert result.risk_score == 72
        assert result.key_terms == ["indemnity", "term"]
        assert result.risk_factors[0].severity is Severity.HIGH
        assert result.recommendations[0].priority is Priority.HIGH
        clause = result.clauses[0]
        assert clause.type is ClauseType.LIABILITY
        assert clause.position.page == 2
        assert clause.position.section == "7.1"
        assert result.is_fallback is False

    def test_unknown_clause_type_becomes_other(self) -> None:
        payload = _make_payload()
        payload["clauses"][0]["type"] = "WARRANTY"

        result = validate_and_build(payload)

        assert result.clauses[0].type is ClauseType.OTHER

    @pytest.mark.parametrize("raw, expected", [(140, 100), (-5, 0), (49.6, 50)])
    def test_risk_score_is_rounded_and_clamped(self, raw: float, expected: int) -> None:
        assert validate_and_build(_make_payload(riskScore=raw)).risk_score == expected

    @pytest.mark.parametrize("raw", ["high", None, True, float("nan"), float("inf")])
    def test_invalid_risk_score_raises(self, raw: object) -> None:
        with pytest.raises(AnalysisValidationError, match="riskScore"):
            validate_and_build(_make_payload(riskScore=raw))

    def test_missing_summary_raises(self) -> None:
        payload = _make_payload()
        del payload["overallSummary"]
        with pytest.raises(AnalysisValidationError, match="overallSummary"):
            validate_and_build(payload)

    def test_missing_lists_default_to_empty(self) -> None:
        payload = _make_payload()
        for key in ("keyTerms", "riskFactors", "recommendations", "clauses"):
            del payload[key]

        result = validate_and_build(payload)

        assert result.key_terms == []
        assert result.risk_factors == []
        assert result.recommendations == []
        assert result.clauses == []

    def test_non_list_collection_raises(self) -> None:
        with pytest.raises(AnalysisValidationError, match="riskFactors"):
            validate_and_build(_make_payload(riskFactors="none"))

    def test_unknown_severity_and_priority_become_medium(self) -> None:
        payload = _make_payload()
        payload["riskFactors"][0]["severity"] = "SEVERE"
        payload["recommendations"][0]["priority"] = "URGENT"
        payload["clauses"][0]["riskLevel"] = None

        result = validate_and_build(payload)

        assert result.risk_factors[0].severity is Severity.MEDIUM
        assert result.recommendations[0].priority is Priority.MEDIUM
        assert result.clauses[0].risk_level is Severity.MEDIUM

    def test_missing_position_defaults(self) -> None:
        payload = _make_payload()
        del payload["clauses"][0]["position"]

        clause = validate_and_build(payload).clauses[0]

        assert clause.position.page == 0
        assert clause.position.section == "N/A"

    def test_non_object_item_raises(self) -> None:
        with pytest.raises(AnalysisValidationError, match="Clause at index 0"):
            validate_and_build(_make_payload(clauses=["just text"]))

