import io

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

LETTER_LINES = [
    "Royal Infirmary Outpatients",
    "NHS No: 943 476 5919",
    "29th January 2025",
    "Dear Ms Smith,",
    "Your appointment is on 12/02/2025 at 10:30.",
    "Please bring a list of your current medication.",
]


def _render(pages: list[list[str]]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    for lines in pages:
        y = 780
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _render([["Hello PDF World"]])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _render([["Page one content"], ["Page two content"]])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _render([[]])


@pytest.fixture()
def letter_pdf_bytes() -> bytes:
    """Generate a one-page NHS letter with a number, a date and a salutation."""
    return _render([LETTER_LINES])
