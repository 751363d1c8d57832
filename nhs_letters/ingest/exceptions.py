from nhs_letters.validation.models import UploadRejection


class IngestError(Exception):
    """Base exception for upload failures; carries what the API returns."""

    status_code: int = 500
    error: str = "Failed to upload file"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, object]:
        return {"error": self.error, "message": self.message}


class UploadValidationError(IngestError):
    """Raised when the upload fails content-type, extension, magic-byte or size checks."""

    status_code = 400

    def __init__(self, rejection: UploadRejection) -> None:
        super().__init__(rejection.message)
        self.rejection = rejection
        self.error = rejection.error


class DuplicateLetterError(IngestError):
    """Raised when identical content was already stored for the same NHS number."""

    status_code = 409
    error = "Duplicate letter"

    def __init__(self, existing_file: str, uploaded_at: str) -> None:
        super().__init__("This letter has already been uploaded.")
        self.existing_file = existing_file
        self.uploaded_at = uploaded_at

    def to_payload(self) -> dict[str, object]:
        return {
            **super().to_payload(),
            "existing_file": self.existing_file,
            "uploaded_at": self.uploaded_at,
        }


class ExtractionFailure(IngestError):
    """Raised when the PDF parses as a PDF by signature but its text cannot be read."""

    status_code = 422
    error = "Corrupted file"


class PersistenceError(IngestError):
    """Raised when the blob store, record store or event queue is unavailable."""

    status_code = 500
    error = "Failed to upload file"
