from abc import ABC, abstractmethod


class BaseBlobStore(ABC):
    """Contract for raw document storage backends."""

    @property
    @abstractmethod
    def container(self) -> str:
        """Name of the bucket/container blobs are written to."""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store bytes under key, replacing any existing blob.

        Raises:
            BlobStoreError: if the blob cannot be written.
        """

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Return the bytes stored under key.

        Raises:
            BlobNotFoundError: if no blob exists under key.
            BlobStoreError: if the blob cannot be read.
        """
