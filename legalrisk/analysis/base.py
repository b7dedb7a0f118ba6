from abc import ABC, abstractmethod

from legalrisk.analysis.models import AnalysisResult
from legalrisk.vectorindex.base import VectorMatch


class BaseAnalyzer(ABC):
    """Contract for all analysis engines."""

    @abstractmethod
    def analyze(self, text: str, similar_documents: list[VectorMatch]) -> AnalysisResult:
        """Produce a structured risk analysis of a legal document.

        Args:
            text: Extracted document text.
            similar_documents: Prior documents of the same owner, best match
                first. May be empty.

        Returns:
            A validated AnalysisResult, or the fallback analysis when the
            model response is unusable.

        Raises:
            AnalysisUnavailableError: if the model call cannot be attempted.
        """

    def close(self) -> None:
        """Release the underlying model client. No-op by default."""
