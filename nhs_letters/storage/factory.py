from pathlib import Path

from nhs_letters.config.settings import Settings
from nhs_letters.storage.base import BaseBlobStore
from nhs_letters.storage.exceptions import UnsupportedStorageDiskError
from nhs_letters.storage.local_storage import LocalBlobStore


class BlobStoreFactory:
    """Creates the blob store selected by settings."""

    @classmethod
    def create(cls, settings: Settings, files_root: Path | None = None) -> BaseBlobStore:
        disk = settings.storage_disk.lower()
        if disk != "local":
            raise UnsupportedStorageDiskError(f"storage_disk '{disk}' is not supported")
        root = files_root if files_root is not None else Path(settings.files_root)
        return LocalBlobStore(container=settings.storage_container, files_root=root)
