"""
File Storage Services

The storage index: the only component that keeps the record store and
the blob store consistent with each other.

Writes go record first, blob second. The two stores cannot be updated
atomically together, so a failed blob write leaves a record without a
blob, and a record removed by expiry leaves a blob without a record.
Both states are repaired by collect(), which is idempotent and safe to
run at any time.
"""

import builtins
import logging
from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional

from fileshare.domain.errors import (
    FileNotFoundError,
    StorageClosedError,
    StorageInitializationError,
)

from .clock import Clock, SystemClock
from .entities import FileDescriptor, FileRecord
from .repositories import FileRecordRepository
from .storage_repository import IFileStorageRepository
from .value_objects import FileId


@dataclass
class CollectionReport:
    """Outcome of one garbage collection pass."""
    records_removed: int = 0
    blobs_removed: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "records_removed": self.records_removed,
            "blobs_removed": self.blobs_removed,
            "errors": list(self.errors),
        }


class StorageIndex:
    """
    Domain service composing the clock, the record store and the blob store.

    Owns both stores for its whole lifetime: callers go through upload(),
    get(), open_blob(), count() and collect() and never touch a store
    directly. No locking is added on top of what the record store's
    transactions and the filesystem already provide.
    """

    def __init__(
        self,
        records: FileRecordRepository,
        blobs: IFileStorageRepository,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the index and provision both stores.

        Args:
            records: Record store repository
            blobs: Blob store repository
            clock: Time source, defaults to the system clock
            logger: Logger, defaults to this module's logger

        Raises:
            StorageInitializationError: If the blob root or the schema
                cannot be created
        """
        self.records = records
        self.blobs = blobs
        self.clock = clock if clock is not None else SystemClock()
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._closed = False

        try:
            self.blobs.ensure_directory()
        except Exception as e:
            raise StorageInitializationError(
                f"Failed to create storage directory: {e}", e
            ) from e

        try:
            self.records.migrate()
        except Exception as e:
            raise StorageInitializationError(
                f"Failed to create record schema: {e}", e
            ) from e

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise StorageClosedError("Storage index is closed")

    def upload(self, lifetime: int, content: BinaryIO, name: str) -> str:
        """
        Store a new file.

        Args:
            lifetime: Requested lifetime in seconds; zero or negative values
                produce a record that the next collection removes
            content: Binary stream, read until exhausted
            name: Original file name, used for display only

        Returns:
            The new file identifier

        Raises:
            StorageClosedError: If the index is closed
            Exception: Record or blob store errors, unchanged
        """
        self._ensure_open()

        record = FileRecord.create(
            file_id=str(FileId.generate()),
            now=self.clock.now(),
            lifetime=lifetime,
            name=name,
        )

        try:
            self.records.insert(record)
        except Exception as e:
            self.logger.warning(f"Uploading file {name} failed due to {e}")
            raise

        try:
            size = self.blobs.save(record.file_id, content)
        except Exception as e:
            # The record stays behind without a blob until it expires and
            # is collected.
            self.logger.warning(
                f"Uploading file {name} as {record.file_id} failed due to {e}"
            )
            raise

        self.logger.info(
            f"Saved file {name} as {record.file_id} ({size} bytes) "
            f"with lifetime {lifetime} second(s)"
        )
        return record.file_id

    def get(self, file_id: str) -> FileDescriptor:
        """
        Look up a file by identifier.

        Expired records that have not been collected yet are still
        returned; callers decide how to serve them.

        Args:
            file_id: File identifier

        Returns:
            FileDescriptor for the file

        Raises:
            FileNotFoundError: If no record exists for the identifier
            StorageClosedError: If the index is closed
        """
        self._ensure_open()

        record = self.records.get_by_id(file_id)
        if record is None:
            self.logger.debug(f"File {file_id} not found")
            raise FileNotFoundError(f"File not found: {file_id}")

        return FileDescriptor.from_record(record, self.blobs.path_for(file_id))

    def open_blob(self, descriptor: FileDescriptor) -> BinaryIO:
        """
        Open the content of a looked-up file for reading.

        Raises:
            FileNotFoundError: If the record exists but its blob does not
                (an upload that failed after the record was written)
        """
        self._ensure_open()

        try:
            return self.blobs.open_for_read(descriptor.file_id)
        except builtins.FileNotFoundError as e:
            raise FileNotFoundError(
                f"Content missing for file: {descriptor.file_id}", e
            ) from e

    def count(self) -> int:
        """
        Count all records, expired or not.

        Raises:
            StorageClosedError: If the index is closed
        """
        self._ensure_open()

        try:
            return self.records.count()
        except Exception as e:
            self.logger.warning(f"Failed to retrieve database record count due to {e}")
            raise

    def collect(self) -> CollectionReport:
        """
        Remove expired records, then blobs that no longer have a record.

        Both phases always run. A failing phase is logged at warning level
        and reported in the returned CollectionReport; it never raises.

        Returns:
            CollectionReport with removal counts and phase errors

        Raises:
            StorageClosedError: If the index is closed
        """
        self._ensure_open()
        report = CollectionReport()

        self.logger.debug("Starting database cleanup")
        try:
            report.records_removed = self._drop_expired_records()
        except Exception as e:
            error_msg = f"Database cleanup failed due to {e}"
            report.errors.append(error_msg)
            self.logger.warning(error_msg)

        if report.records_removed > 0:
            self.logger.info(
                f"Database cleanup finished; {report.records_removed} record(s) removed"
            )
        else:
            self.logger.info("Database cleanup finished")

        self.logger.debug("Starting obsolete file removal")
        try:
            self._drop_orphaned_blobs(report)
        except Exception as e:
            error_msg = f"Obsolete file removal failed due to {e}"
            report.errors.append(error_msg)
            self.logger.warning(error_msg)

        self.logger.info(f"Removed {report.blobs_removed} obsolete file(s)")
        return report

    def _drop_expired_records(self) -> int:
        before, after = self.records.delete_expired(self.clock.now())
        return max(0, before - after)

    def _drop_orphaned_blobs(self, report: CollectionReport) -> None:
        # Deletions are not transactional: whatever was removed before a
        # failure stays removed and is counted.
        for entry in self.blobs.list_entries():
            if not entry.is_file:
                self.logger.debug(f"Skipping non-file entry {entry.path}")
                continue

            if self.records.exists(entry.name):
                continue

            self.blobs.remove(entry.name)
            report.blobs_removed += 1
            self.logger.debug(f"Removed obsolete file {entry.path}")

    def close(self) -> None:
        """
        Release the record store connection.

        Safe to call twice; every other operation fails afterwards.
        """
        if self._closed:
            return

        self.records.close()
        self._closed = True
