"""
File Storage - where uploaded credential files end up.

FileStorage is the seam: save() returns a public URL plus an opaque id, and
delete() takes that id. The bundled backend writes under settings.upload_dir,
which main.py serves at settings.uploads_base_url.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from typing import Protocol

from credhub.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


@dataclass(frozen=True)
class StoredFile:
    url: str
    storage_id: str
    filename: str


class FileStorage(Protocol):
    def save(self, content: bytes, filename: str, folder: str = "uploads") -> StoredFile: ...

    def delete(self, storage_id: str) -> None: ...

    def owns_url(self, url: str) -> bool: ...


class LocalFileStorage:
    """
    Stores files on local disk: <root>/<folder>/<uuid><ext>.
    The storage id is the path relative to root.
    """

    def __init__(self, root: str = None, base_url: str = None):
        self.root = os.path.abspath(root or settings.upload_dir)
        self.base_url = (base_url or settings.uploads_base_url).rstrip("/")

    def _path(self, storage_id: str) -> str:
        path = os.path.abspath(os.path.join(self.root, storage_id))
        if os.path.commonpath([path, self.root]) != self.root:
            raise ValueError(f"Storage id escapes the upload directory: {storage_id}")
        return path

    def save(self, content: bytes, filename: str, folder: str = "uploads") -> StoredFile:
        ext = os.path.splitext(filename)[1].lower()
        stored_name = f"{uuid.uuid4().hex}{ext}"
        storage_id = f"{folder.strip('/')}/{stored_name}"
        path = self._path(storage_id)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(content)
        logger.info("Stored %s (%d bytes) as %s", filename, len(content), storage_id)
        return StoredFile(url=f"{self.base_url}/{storage_id}", storage_id=storage_id, filename=stored_name)

    def delete(self, storage_id: str) -> None:
        """Remove a stored file; failures are logged, never raised."""
        try:
            os.remove(self._path(storage_id))
        except (OSError, ValueError) as e:
            logger.warning("Could not delete stored file %s: %s", storage_id, e)

    def owns_url(self, url: str) -> bool:
        if not url or not url.startswith(self.base_url + "/"):
            return False
        storage_id = url[len(self.base_url) + 1:]
        try:
            return os.path.isfile(self._path(storage_id))
        except ValueError:
            return False


# Singleton instance
_storage: FileStorage = None


def get_storage() -> FileStorage:
    """Get or create the configured storage backend (singleton pattern)"""
    global _storage
    if _storage is None:
        _storage = LocalFileStorage()
    return _storage


def set_storage(storage: FileStorage) -> None:
    """Swap the backend (used by tests)."""
    global _storage
    _storage = storage
