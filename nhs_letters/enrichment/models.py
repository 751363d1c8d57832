from dataclasses import dataclass, field
from enum import StrEnum


class EnrichmentOutcome(StrEnum):
    PROCESSED = "processed"
    PROCESSED_WITHOUT_BODY = "processed_without_body"
    SKIPPED_NOT_PDF = "skipped_not_pdf"
    SKIPPED_NO_RECORD = "skipped_no_record"
    SKIPPED_ALREADY_PROCESSED = "skipped_already_processed"


@dataclass
class EnrichmentReport:
    """Per-key outcomes for one batch of events, in processing order."""

    outcomes: list[tuple[str, EnrichmentOutcome]] = field(default_factory=list)

    @property
    def records_processed(self) -> int:
        return len(self.outcomes)

    def count(self, outcome: EnrichmentOutcome) -> int:
        return sum(1 for _key, o in self.outcomes if o is outcome)
