class AnalysisError(Exception):
    """Raised when content analysis fails."""


class AnalysisValidationError(AnalysisError):
    """Raised when the model response does not match the Analysis shape."""


class AnalysisNetworkError(AnalysisError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
