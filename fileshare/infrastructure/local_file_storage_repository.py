"""
Local File Storage Repository Implementation

Concrete implementation of IFileStorageRepository for the local filesystem.
Every blob is a plain file directly under the base path, named exactly by
its identifier and carrying no extension.
"""

import os
from pathlib import Path
from typing import BinaryIO, Iterator

from fileshare.domain.file_storage.storage_repository import (
    BlobEntry,
    IFileStorageRepository,
)

# Blobs are created readable and writable by the service user only
BLOB_MODE = 0o600


class LocalFileStorageRepository(IFileStorageRepository):
    """
    Local filesystem implementation of IFileStorageRepository.

    Uses pathlib and os for all filesystem operations. Blob names are
    validated so that no name can escape the base directory.

    Attributes:
        base_path: Root directory holding every blob
    """

    def __init__(self, base_path: str):
        """
        Initialize the local file storage repository.

        The directory is not touched here; ensure_directory() provisions it.

        Args:
            base_path: Root directory for blob storage
        """
        self.base_path = Path(base_path)

    def _resolve(self, name: str) -> Path:
        """
        Map a blob name to its full path.

        Raises:
            ValueError: If the name is empty or contains a path component
        """
        if not name:
            raise ValueError("blob name cannot be empty")

        if name in (".", "..") or "/" in name or os.sep in name:
            raise ValueError(f"invalid blob name: {name!r}")

        # Whitespace-only names are valid so stray files stay removable
        return self.base_path / name

    # IFileStorageRepository interface methods

    def ensure_directory(self) -> None:
        """
        Ensure the base storage directory exists.

        Raises:
            PermissionError: If insufficient permissions to create directory
            OSError: If directory creation fails for other reasons
        """
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise PermissionError(
                f"Insufficient permissions to create storage directory: {self.base_path}"
            ) from e
        except OSError as e:
            raise OSError(
                f"Failed to create storage directory: {self.base_path}"
            ) from e

    def path_for(self, name: str) -> str:
        return str(self._resolve(name))

    def open_for_write(self, name: str) -> BinaryIO:
        full_path = self._resolve(name)
        fd = os.open(full_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, BLOB_MODE)
        return os.fdopen(fd, "wb")

    def open_for_read(self, name: str) -> BinaryIO:
        return open(self._resolve(name), "rb")

    def remove(self, name: str) -> None:
        """
        Delete a blob.

        This operation is idempotent: a missing blob is not an error.
        Directories are never removed.

        Raises:
            PermissionError: If there are insufficient permissions to delete
            IsADirectoryError: If the name refers to a directory
            OSError: If there are I/O errors during the operation
        """
        full_path = self._resolve(name)

        if full_path.is_dir():
            raise IsADirectoryError(f"Refusing to remove directory: {full_path}")

        try:
            full_path.unlink()
        except FileNotFoundError:
            pass

    def list_entries(self) -> Iterator[BlobEntry]:
        with os.scandir(self.base_path) as entries:
            for entry in entries:
                yield BlobEntry(
                    name=entry.name,
                    path=entry.path,
                    is_file=entry.is_file(follow_symlinks=False),
                )

    def exists(self, name: str) -> bool:
        """
        Check if a blob exists.

        Never raises exceptions; invalid names return False.
        """
        try:
            return self._resolve(name).is_file()
        except (OSError, ValueError):
            return False
