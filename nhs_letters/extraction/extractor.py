"""Regex extraction of NHS number, letter date and body from letter text.

Date formats are tried in table order and the first match wins:
1. long form, "5th March 2024"
2. short numeric, "05/03/2024" or "5-3-2024" (day first)
3. ISO, "2024-03-05"
"""

import re
from collections.abc import Callable

from nhs_letters.extraction.models import LetterDetails

_MONTHS: dict[str, str] = {
    "january": "01",
    "february": "02",
    "march": "03",
    "april": "04",
    "may": "05",
    "june": "06",
    "july": "07",
    "august": "08",
    "september": "09",
    "october": "10",
    "november": "11",
    "december": "12",
}

_NHS_NUMBER = re.compile(r"NHS\s*No\.?\s*[:\-]?\s*(\d[\d \t]*)", re.IGNORECASE | re.ASCII)
_ASCII_DIGITS = re.compile(r"[0-9]+")
_BODY = re.compile(r"Dear\b[\s\S]*")
_PARTITION = re.compile(r"^\d{4}-\d{2}")
_WHITESPACE = re.compile(r"\s+")


def _long_date(match: re.Match[str]) -> str:
    day, month, year = match.groups()
    return f"{year}-{_MONTHS[month.lower()]}-{day.zfill(2)}"


def _short_date(match: re.Match[str]) -> str:
    day, month, year = match.groups()
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def _iso_date(match: re.Match[str]) -> str:
    return match.group(0)


DATE_PATTERNS: tuple[tuple[re.Pattern[str], Callable[[re.Match[str]], str]], ...] = (
    (
        re.compile(
            r"(\d{1,2})(?:st|nd|rd|th)?\s+(" + "|".join(_MONTHS) + r")\s+(\d{4})",
            re.IGNORECASE,
        ),
        _long_date,
    ),
    (re.compile(r"(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})"), _short_date),
    (re.compile(r"(\d{4})-(\d{2})-(\d{2})"), _iso_date),
)


def extract_letter_details(text: str | None) -> LetterDetails:
    """Extract identifier, letter date and body. Missing fields come back as None."""
    if not text:
        return LetterDetails()
    return LetterDetails(
        identifier=extract_identifier(text),
        letter_date=extract_letter_date(text),
        body=extract_body(text),
    )


def extract_identifier(text: str) -> str | None:
    """Return the labelled NHS number with inner whitespace collapsed to single spaces."""
    match = _NHS_NUMBER.search(text)
    if match is None:
        return None
    value = _WHITESPACE.sub(" ", match.group(1).strip())
    return value or None


def normalize_identifier(identifier: str | None) -> str | None:
    """Strip all whitespace; anything left that is not purely ASCII digits is discarded."""
    if identifier is None:
        return None
    digits = _WHITESPACE.sub("", identifier)
    return digits if _ASCII_DIGITS.fullmatch(digits) else None


def extract_letter_date(text: str) -> str | None:
    for pattern, normalize in DATE_PATTERNS:
        match = pattern.search(text)
        if match is not None:
            return normalize(match)
    return None


def extract_body(text: str) -> str | None:
    match = _BODY.search(text)
    return match.group(0).strip() if match else None


def date_partition(value: str | None) -> str | None:
    """Return the YYYY-MM prefix of an ISO date or timestamp, or None."""
    if not value:
        return None
    match = _PARTITION.match(value)
    return match.group(0) if match else None
