class RecordStoreError(Exception):
    """Raised when the record store cannot complete an operation."""


class DuplicateRecordKeyError(RecordStoreError):
    """Raised when a record with the same (identifier, uploaded_at) exists."""


class RecordValidationError(RecordStoreError):
    """Raised when a stored row does not match the LetterRecord shape."""
