from dataclasses import dataclass
from enum import StrEnum


class RejectionKind(StrEnum):
    INVALID_CONTENT_TYPE = "invalid_content_type"
    INVALID_EXTENSION = "invalid_extension"
    INVALID_MAGIC_BYTES = "invalid_magic_bytes"
    FILE_TOO_LARGE = "file_too_large"


@dataclass(frozen=True)
class UploadRejection:
    """Why an upload was refused, in a form the API can hand back to the user."""

    kind: RejectionKind
    error: str
    message: str
