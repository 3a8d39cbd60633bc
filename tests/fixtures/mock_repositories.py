"""
Mock Repository Implementations

In-memory implementations of the storage interfaces for unit testing.
Provides realistic behavior with inspection methods for test assertions.
"""

import io
from typing import Any, Dict, Iterator, List, Optional, Tuple

from fileshare.domain.file_storage import (
    BlobEntry,
    Clock,
    FileRecord,
    FileRecordRepository,
    IFileStorageRepository,
)


class FixedClock(Clock):
    """Clock that only moves when a test moves it."""

    def __init__(self, now: int = 0):
        self.current = now

    def now(self) -> int:
        return self.current

    def set(self, now: int) -> None:
        self.current = now


class MockFileRecordRepository(FileRecordRepository):
    """
    In-memory mock implementation of FileRecordRepository.

    Individual methods can be made to fail by putting an exception in
    ``failures`` under the method name.
    """

    def __init__(self):
        self._storage: Dict[str, FileRecord] = {}
        self._call_history: List[Dict[str, Any]] = []
        self.failures: Dict[str, Exception] = {}
        self.closed = False

    def _record_call(self, method: str, **kwargs) -> None:
        self._call_history.append({"method": method, "args": kwargs})
        if method in self.failures:
            raise self.failures[method]

    def migrate(self) -> None:
        self._record_call("migrate")

    def insert(self, record: FileRecord) -> None:
        self._record_call("insert", file_id=record.file_id)
        self._storage[record.file_id] = record

    def get_by_id(self, file_id: str) -> Optional[FileRecord]:
        self._record_call("get_by_id", file_id=file_id)
        return self._storage.get(file_id)

    def count(self) -> int:
        self._record_call("count")
        return len(self._storage)

    def delete_expired(self, now: int) -> Tuple[int, int]:
        self._record_call("delete_expired", now=now)
        before = len(self._storage)
        self._storage = {
            file_id: record
            for file_id, record in self._storage.items()
            if not record.expires < now
        }
        return before, len(self._storage)

    def exists(self, file_id: str) -> bool:
        self._record_call("exists", file_id=file_id)
        return file_id in self._storage

    def close(self) -> None:
        self._record_call("close")
        self.closed = True

    # Inspection methods for testing

    def get_call_history(self) -> List[Dict[str, Any]]:
        return self._call_history.copy()

    def calls_to(self, method: str) -> int:
        return sum(1 for call in self._call_history if call["method"] == method)


class _BlobWriter(io.BytesIO):
    def __init__(self, storage: Dict[str, bytes], name: str):
        super().__init__()
        self._target = storage
        self._name = name

    def close(self) -> None:
        if not self.closed:
            self._target[self._name] = self.getvalue()
        super().close()


class MockFileStorageRepository(IFileStorageRepository):
    """In-memory mock implementation of IFileStorageRepository."""

    def __init__(self):
        self._storage: Dict[str, bytes] = {}
        self.directories: List[str] = []
        self.failures: Dict[str, Exception] = {}
        self._scheduled: Dict[str, Tuple[int, Exception]] = {}
        self._calls: Dict[str, int] = {}

    def fail_on_call(self, method: str, call_number: int, error: Exception) -> None:
        """Make only the ``call_number``-th call of ``method`` raise ``error``."""
        self._scheduled[method] = (call_number, error)

    def _check(self, method: str) -> None:
        self._calls[method] = self._calls.get(method, 0) + 1
        if method in self.failures:
            raise self.failures[method]
        scheduled = self._scheduled.get(method)
        if scheduled and scheduled[0] == self._calls[method]:
            raise scheduled[1]

    def ensure_directory(self) -> None:
        self._check("ensure_directory")

    def path_for(self, name: str) -> str:
        return f"memory://{name}"

    def open_for_write(self, name: str):
        self._check("open_for_write")
        return _BlobWriter(self._storage, name)

    def open_for_read(self, name: str):
        self._check("open_for_read")
        if name not in self._storage:
            raise FileNotFoundError(name)
        return io.BytesIO(self._storage[name])

    def remove(self, name: str) -> None:
        self._check("remove")
        self._storage.pop(name, None)

    def list_entries(self) -> Iterator[BlobEntry]:
        self._check("list_entries")
        for name in list(self._storage):
            yield BlobEntry(name=name, path=self.path_for(name), is_file=True)
        for name in self.directories:
            yield BlobEntry(name=name, path=self.path_for(name), is_file=False)

    def exists(self, name: str) -> bool:
        return name in self._storage

    # Inspection methods for testing

    def put(self, name: str, content: bytes) -> None:
        self._storage[name] = content

    def names(self) -> List[str]:
        return sorted(self._storage)
