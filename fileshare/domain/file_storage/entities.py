"""
File Storage Entities

Domain entities for shared file management.
"""

from dataclasses import dataclass

# Longest name the record store keeps; longer names are truncated
NAME_MAX_LENGTH = 255


@dataclass(frozen=True)
class FileRecord:
    """
    Entity representing one row of the record store.

    A record is created once at upload time and deleted only by garbage
    collection; it is never updated in place.
    """
    file_id: str
    expires: int
    name: str

    @classmethod
    def create(cls, file_id: str, now: int, lifetime: int, name: str) -> "FileRecord":
        """
        Factory method to create a new record.

        Args:
            file_id: Freshly generated identifier
            now: Current time in UTC epoch seconds
            lifetime: Requested lifetime in seconds (zero or negative allowed)
            name: Original file name supplied by the uploader, truncated
                to NAME_MAX_LENGTH characters

        Returns:
            New FileRecord instance
        """
        return cls(file_id=file_id, expires=now + lifetime, name=name[:NAME_MAX_LENGTH])

    def is_expired(self, now: int) -> bool:
        """Same strict predicate as the collector: equality is not expired."""
        return self.expires < now


@dataclass(frozen=True)
class FileDescriptor:
    """
    Assembled view of a record plus its blob location.

    Returned by lookups and owned transiently by the caller.
    """
    file_id: str
    path: str
    name: str
    expires: int

    @classmethod
    def from_record(cls, record: FileRecord, path: str) -> "FileDescriptor":
        return cls(
            file_id=record.file_id,
            path=path,
            name=record.name,
            expires=record.expires,
        )

    def is_expired(self, now: int) -> bool:
        """
        Check whether the file has outlived its lifetime.

        Args:
            now: Current time in UTC epoch seconds

        Returns:
            True once ``expires`` is strictly less than ``now``
        """
        return self.expires < now

    def remaining_seconds(self, now: int) -> int:
        return max(0, self.expires - now)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "uuid": self.file_id,
            "name": self.name,
            "expires": self.expires,
        }
