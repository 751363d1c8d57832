from nhs_letters.config.settings import Settings
from nhs_letters.logging.logger import Log
from nhs_letters.pdf.base import BasePdfExtractor
from nhs_letters.pdf.exceptions import UnsupportedPdfEngineError
from nhs_letters.pdf.pdfplumber_adapter import PdfPlumberAdapter
from nhs_letters.pdf.pymupdf_adapter import PyMuPdfAdapter

_ENGINES: dict[str, type[BasePdfExtractor]] = {
    "pdfplumber": PdfPlumberAdapter,
    "pymupdf": PyMuPdfAdapter,
}


class PdfExtractorFactory:
    """Picks the text extractor used on uploaded letters (PDF_ENGINE)."""

    @staticmethod
    def engines() -> list[str]:
        return sorted(_ENGINES)

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        name = settings.pdf_engine.strip().lower()
        try:
            extractor_cls = _ENGINES[name]
        except KeyError:
            raise UnsupportedPdfEngineError(
                f"Unknown PDF engine '{name}'. Supported engines: {', '.join(cls.engines())}"
            ) from None
        Log.debug(f"Using {name} for letter text extraction")
        return extractor_cls()
