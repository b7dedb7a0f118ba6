from legalrisk.analysis.models import AnalysisResult

FALLBACK_RISK_SCORE = 50


def fallback_analysis() -> AnalysisResult:
    """Minimal deterministic analysis used when the model yields nothing usable."""
    return AnalysisResult(
        risk_score=FALLBACK_RISK_SCORE,
        overall_summary="Basic analysis without similar context.",
        plain_english="This is a default fallback summary.",
        key_terms=[],
        risk_factors=[],
        recommendations=[],
        clauses=[],
        is_fallback=True,
    )
