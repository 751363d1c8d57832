from abc import ABC, abstractmethod

from nhs_letters.pdf.models import PdfText


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> PdfText:
        """Extract plain text and the page count from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PdfText with pages joined by newlines and stripped.

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """
