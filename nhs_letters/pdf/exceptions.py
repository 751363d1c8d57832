class PdfExtractionError(Exception):
    """Raised when text cannot be extracted from a PDF."""


class UnsupportedPdfEngineError(ValueError):
    """Raised when settings name a PDF engine with no adapter."""
