from abc import ABC, abstractmethod


class BaseSummarizer(ABC):
    """Contract for all letter summarizers."""

    @abstractmethod
    def summarize(self, text: str) -> str:
        """Summarize a letter body.

        Args:
            text: Letter body starting at the salutation.

        Returns:
            Non-empty summary text.

        Raises:
            SummarizationError: on any failure.
        """
