"""
File Storage Value Objects

Immutable value objects for type safety and validation.
"""

import uuid
from dataclasses import dataclass

from fileshare.domain.errors import InvalidFileIdError

FILE_ID_LENGTH = 36


@dataclass(frozen=True)
class FileId:
    """
    Value object representing a validated file identifier.

    Identifiers are canonical lowercase UUID strings (36 characters).
    They double as the blob name, so the format also guarantees a
    safe, extension-less file name inside the blob root.
    """
    value: str

    def __post_init__(self):
        if not self._is_valid():
            raise InvalidFileIdError(f"Invalid file identifier: {self.value!r}")

    def _is_valid(self) -> bool:
        """
        Validate file identifier.

        Requirements:
        - Must be a string of exactly 36 characters
        - Must parse as a UUID and be in canonical lowercase form
        """
        if not isinstance(self.value, str) or len(self.value) != FILE_ID_LENGTH:
            return False

        try:
            return str(uuid.UUID(self.value)) == self.value
        except ValueError:
            return False

    @classmethod
    def generate(cls) -> "FileId":
        """
        Generate a new random file identifier.

        Uses uuid4, which carries 122 random bits; uniqueness is relied
        upon statistically and never checked against the record store.

        Returns:
            New FileId instance
        """
        return cls(str(uuid.uuid4()))

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check a raw string without raising."""
        try:
            cls(value)
        except InvalidFileIdError:
            return False
        return True

    def __str__(self) -> str:
        return self.value
