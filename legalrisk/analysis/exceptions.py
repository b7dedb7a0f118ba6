class AnalysisError(Exception):
    """Raised when the reasoning model does not yield a usable analysis."""


class AnalysisUnavailableError(AnalysisError):
    """Raised when the model call cannot be attempted at all (e.g. no credentials)."""


class AnalysisValidationError(AnalysisError):
    """Raised when the model response fails schema validation."""


class AnalysisNetworkError(AnalysisError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
