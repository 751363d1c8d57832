class BlobStoreError(Exception):
    """Raised when the blob store cannot complete an operation."""


class BlobNotFoundError(BlobStoreError):
    """Raised when no blob exists under the requested key."""


class UnsupportedStorageDiskError(BlobStoreError):
    """Raised when settings select a storage disk that is not supported."""
