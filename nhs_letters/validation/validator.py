from nhs_letters.validation.models import RejectionKind, UploadRejection

PDF_CONTENT_TYPE = "application/pdf"
PDF_EXTENSION = ".pdf"
PDF_MAGIC_BYTES = b"%PDF-"


def validate_upload(
    raw_bytes: bytes,
    content_type: str | None,
    filename: str | None,
    max_bytes: int | None = None,
) -> UploadRejection | None:
    """Check an upload before any extraction runs.

    Checks run in order and stop at the first failure: declared content type,
    filename extension, magic bytes, then the optional size limit.

    Returns:
        None when the upload is acceptable, otherwise the rejection.
    """
    if (content_type or "").strip() != PDF_CONTENT_TYPE:
        return UploadRejection(
            kind=RejectionKind.INVALID_CONTENT_TYPE,
            error="Invalid file type",
            message="Only PDF files are allowed. Content-Type must be application/pdf.",
        )

    if not (filename or "").strip().lower().endswith(PDF_EXTENSION):
        return UploadRejection(
            kind=RejectionKind.INVALID_EXTENSION,
            error="Invalid file extension",
            message="Only PDF files are allowed. Filename must end with .pdf.",
        )

    if len(raw_bytes) < len(PDF_MAGIC_BYTES) or not raw_bytes.startswith(PDF_MAGIC_BYTES):
        return UploadRejection(
            kind=RejectionKind.INVALID_MAGIC_BYTES,
            error="Invalid PDF file",
            message="The uploaded file is not a valid PDF.",
        )

    if max_bytes is not None and len(raw_bytes) > max_bytes:
        return UploadRejection(
            kind=RejectionKind.FILE_TOO_LARGE,
            error="File too large",
            message=f"The uploaded file exceeds the {max_bytes} byte limit.",
        )

    return None
