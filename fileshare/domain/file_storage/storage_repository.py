"""
File Storage Repository Interface

Abstract interface for blob storage operations.
This abstraction allows the domain layer to remain infrastructure-agnostic
by defining contracts for byte storage without depending on a specific
storage implementation.

Blobs are addressed by name only; the name of a blob is the identifier
of the record that owns it and every blob lives directly under the
storage root.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Iterator

# Read and write in chunks for memory efficiency
CHUNK_SIZE = 8192


@dataclass(frozen=True)
class BlobEntry:
    """One entry found directly under the storage root."""
    name: str
    path: str
    is_file: bool


class IFileStorageRepository(ABC):
    """
    Unified interface for blob storage operations.

    Contract Guarantees:
    - Blob names are relative to the storage root and carry no directories
    - remove() and exists() are idempotent
    - Errors other than "missing" propagate to the caller
    - Binary content is handled via BinaryIO for streaming support

    Thread Safety:
    - Distinct blob names never contend with each other
    - The repository adds no locking of its own
    """

    @abstractmethod
    def ensure_directory(self) -> None:
        """
        Create the storage root and any missing parents.

        Raises:
            OSError: If the directory cannot be created
        """
        pass  # pragma: no cover

    @abstractmethod
    def path_for(self, name: str) -> str:
        """
        Get the location of a blob.

        Args:
            name: Blob name

        Returns:
            Location of the blob, whether or not it exists yet
        """
        pass  # pragma: no cover

    @abstractmethod
    def open_for_write(self, name: str) -> BinaryIO:
        """
        Open a blob for writing, creating or truncating it.

        The caller is responsible for closing the returned stream.

        Raises:
            OSError: If the blob cannot be created
        """
        pass  # pragma: no cover

    @abstractmethod
    def open_for_read(self, name: str) -> BinaryIO:
        """
        Open a blob for reading.

        The caller is responsible for closing the returned stream.

        Raises:
            OSError: If the blob is missing or unreadable
        """
        pass  # pragma: no cover

    def save(self, name: str, content: BinaryIO) -> int:
        """
        Stream content into a blob.

        Args:
            name: Blob name
            content: Binary source, read until exhausted

        Returns:
            Number of bytes written

        Raises:
            OSError: If the blob cannot be written
        """
        written = 0
        with self.open_for_write(name) as destination:
            while True:
                chunk = content.read(CHUNK_SIZE)
                if not chunk:
                    break
                destination.write(chunk)
                written += len(chunk)
        return written

    @abstractmethod
    def remove(self, name: str) -> None:
        """
        Delete a blob.

        Removing a blob that does not exist is not an error.

        Raises:
            OSError: If an existing blob cannot be deleted
        """
        pass  # pragma: no cover

    @abstractmethod
    def list_entries(self) -> Iterator[BlobEntry]:
        """
        Enumerate the entries directly under the storage root.

        The root itself is never yielded. Order is unspecified.

        Raises:
            OSError: If the root cannot be listed
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, name: str) -> bool:
        """
        Check if a blob exists.

        Never raises; invalid names return False.
        """
        pass  # pragma: no cover
