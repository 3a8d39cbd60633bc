"""
File Storage Domain

Handles expiring file records, blob storage and their reconciliation.
"""

from .clock import Clock, SystemClock
from .entities import FileDescriptor, FileRecord
from .repositories import FileRecordRepository
from .services import CollectionReport, StorageIndex
from .storage_repository import BlobEntry, IFileStorageRepository
from .value_objects import FileId

__all__ = [
    "BlobEntry",
    "Clock",
    "CollectionReport",
    "FileDescriptor",
    "FileId",
    "FileRecord",
    "FileRecordRepository",
    "IFileStorageRepository",
    "StorageIndex",
    "SystemClock",
]
