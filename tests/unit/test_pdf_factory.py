from unittest.mock import MagicMock

import pytest

from nhs_letters.pdf.exceptions import UnsupportedPdfEngineError
from nhs_letters.pdf.factory import PdfExtractorFactory
from nhs_letters.pdf.pdfplumber_adapter import PdfPlumberAdapter
from nhs_letters.pdf.pymupdf_adapter import PyMuPdfAdapter


class TestPdfExtractorFactory:
    def test_creates_pdfplumber_adapter(self) -> None:
        settings = MagicMock(pdf_engine="pdfplumber")
        assert isinstance(PdfExtractorFactory.create(settings), PdfPlumberAdapter)

    def test_engine_name_is_case_insensitive(self) -> None:
        settings = MagicMock(pdf_engine=" PyMuPDF ")
        assert isinstance(PdfExtractorFactory.create(settings), PyMuPdfAdapter)

    def test_lists_supported_engines(self) -> None:
        assert PdfExtractorFactory.engines() == ["pdfplumber", "pymupdf"]

    def test_unknown_engine_raises(self) -> None:
        settings = MagicMock(pdf_engine="tesseract")
        with pytest.raises(UnsupportedPdfEngineError, match="pdfplumber, pymupdf"):
            PdfExtractorFactory.create(settings)

    def test_unknown_engine_is_value_error(self) -> None:
        settings = MagicMock(pdf_engine="tesseract")
        with pytest.raises(ValueError):
            PdfExtractorFactory.create(settings)
