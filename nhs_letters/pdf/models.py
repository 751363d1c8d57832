from dataclasses import dataclass


@dataclass(frozen=True)
class PdfText:
    """Text and page count extracted from a PDF."""

    text: str
    page_count: int
