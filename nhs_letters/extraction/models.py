from dataclasses import dataclass


@dataclass(frozen=True)
class LetterDetails:
    """Best-effort fields pulled out of a letter's text. Any may be None."""

    identifier: str | None = None
    letter_date: str | None = None
    body: str | None = None
