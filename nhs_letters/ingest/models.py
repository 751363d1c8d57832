from dataclasses import dataclass


@dataclass(frozen=True)
class IngestResult:
    """What the uploader gets back straight away, before enrichment runs."""

    container: str
    blob_key: str
    size: int
    identifier: str | None
    letter_date: str | None
    letter_body: str | None
    text: str
    num_pages: int
    message: str = "File uploaded successfully"

    def to_payload(self) -> dict[str, object]:
        return {
            "message": self.message,
            "bucket": self.container,
            "key": self.blob_key,
            "size": self.size,
            "nhs_number": self.identifier,
            "letter_date": self.letter_date,
            "letter_body": self.letter_body,
            "pdf_content": {
                "text": self.text,
                "num_pages": self.num_pages,
            },
        }
