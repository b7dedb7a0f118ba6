from dataclasses import dataclass, field
from enum import Enum


class ClauseType(str, Enum):
    TERMINATION = "TERMINATION"
    PAYMENT = "PAYMENT"
    LIABILITY = "LIABILITY"
    CONFIDENTIALITY = "CONFIDENTIALITY"
    INTELLECTUAL_PROPERTY = "INTELLECTUAL_PROPERTY"
    DISPUTE_RESOLUTION = "DISPUTE_RESOLUTION"
    FORCE_MAJEURE = "FORCE_MAJEURE"
    OTHER = "OTHER"

    @classmethod
    def coerce(cls, raw: object) -> "ClauseType":
        """Map any value outside the enumeration to OTHER."""
        if isinstance(raw, str):
            try:
                return cls(raw.strip().upper())
            except ValueError:
                return cls.OTHER
        return cls.OTHER


class Severity(str, Enum):
    """Used for both risk factor severity and clause risk level."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass(frozen=True)
class RiskFactor:
    factor: str
    severity: Severity
    explanation: str


@dataclass(frozen=True)
class Recommendation:
    category: str
    suggestion: str
    priority: Priority


@dataclass(frozen=True)
class ClausePosition:
    page: int = 0
    section: str = "N/A"


@dataclass(frozen=True)
class Clause:
    type: ClauseType
    content: str
    risk_level: Severity
    explanation: str
    suggestions: list[str] = field(default_factory=list)
    position: ClausePosition = field(default_factory=ClausePosition)


@dataclass(frozen=True)
class AnalysisResult:
    """Structured risk analysis produced by the analysis engine."""

    risk_score: int
    overall_summary: str
    plain_english: str
    key_terms: list[str] = field(default_factory=list)
    risk_factors: list[RiskFactor] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    clauses: list[Clause] = field(default_factory=list)
    is_fallback: bool = False

