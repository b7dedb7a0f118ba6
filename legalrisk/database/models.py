from dataclasses import dataclass, field
from datetime import datetime

from legalrisk.analysis.models import Clause, Recommendation, RiskFactor
from legalrisk.processor.models import Document


@dataclass(frozen=True)
class AnalysisSummary:
    """Analysis columns shown in document listings."""

    id: int
    risk_score: int
    overall_summary: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class AnalysisRecord:
    """Represents a row from the analyses table with its child rows."""

    id: int
    document_id: int
    risk_score: int
    overall_summary: str
    plain_english: str
    key_terms: list[str] = field(default_factory=list)
    risk_factors: list[RiskFactor] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    clauses: list[Clause] = field(default_factory=list)
    created_at: datetime | None = None


@dataclass(frozen=True)
class DocumentListItem:
    document: Document
    analysis: AnalysisSummary | None = None


@dataclass(frozen=True)
class DocumentWithAnalysis:
    document: Document
    analysis: AnalysisRecord | None = None
