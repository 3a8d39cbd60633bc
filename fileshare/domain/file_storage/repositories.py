"""
File Record Repositories

Repository interface for file record persistence.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

from .entities import FileRecord


class FileRecordRepository(ABC):
    """
    Abstract repository interface for the transactional record store.

    The store is a single table keyed by file identifier holding the
    expiration time and the original name of every uploaded file.
    Implementations let store errors propagate unchanged.
    """

    @abstractmethod
    def migrate(self) -> None:
        """
        Create the schema if it is missing.

        Must be idempotent and never destructive of existing rows.
        """
        pass  # pragma: no cover

    @abstractmethod
    def insert(self, record: FileRecord) -> None:
        """
        Insert a new record.

        Args:
            record: FileRecord to persist

        Raises:
            Exception: Store specific error on constraint violation or I/O failure
        """
        pass  # pragma: no cover

    @abstractmethod
    def get_by_id(self, file_id: str) -> Optional[FileRecord]:
        """
        Retrieve a record by identifier.

        Args:
            file_id: File identifier

        Returns:
            FileRecord if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def count(self) -> int:
        """
        Count all records regardless of expiration.

        Returns:
            Number of records in the store
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete_expired(self, now: int) -> Tuple[int, int]:
        """
        Delete every record whose expiration is strictly less than ``now``.

        Runs in a single transaction: either all qualifying rows are
        removed or none are.

        Args:
            now: Current time in UTC epoch seconds

        Returns:
            Tuple of (count before deletion, count after deletion)
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, file_id: str) -> bool:
        """
        Check if a record exists.

        Args:
            file_id: File identifier

        Returns:
            True if a record with this identifier exists
        """
        pass  # pragma: no cover

    @abstractmethod
    def close(self) -> None:
        """Release the underlying connection."""
        pass  # pragma: no cover
