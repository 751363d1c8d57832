from pathlib import Path

from nhs_letters.storage.base import BaseBlobStore
from nhs_letters.storage.exceptions import BlobNotFoundError, BlobStoreError


def blob_file_path(files_root: Path, container: str, key: str) -> Path:
    """Build path to a blob file: {files_root}/{container}/{key}"""
    return files_root / container / key


class LocalBlobStore(BaseBlobStore):
    """Stores blobs as files below a root directory, one folder per container."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, container: str, files_root: Path | None = None) -> None:
        self._container = container
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    @property
    def container(self) -> str:
        return self._container

    def put(self, key: str, data: bytes, content_type: str) -> None:
        path = self._resolve_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise BlobStoreError(f"Failed to write blob {key}: {exc}") from exc

    def get(self, key: str) -> bytes:
        path = self._resolve_path(key)
        if not path.exists():
            raise BlobNotFoundError(f"Blob not found: {key}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise BlobStoreError(f"Failed to read blob {key}: {exc}") from exc

    def _resolve_path(self, key: str) -> Path:
        root = (self._files_root / self._container).resolve()
        path = blob_file_path(self._files_root, self._container, key).resolve()
        if path == root or root not in path.parents:
            raise BlobStoreError(f"Blob key escapes the container: {key!r}")
        return path
