class SummarizationError(Exception):
    """Raised when a letter cannot be summarized."""


class SummarizationNetworkError(SummarizationError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
