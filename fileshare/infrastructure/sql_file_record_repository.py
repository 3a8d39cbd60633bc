"""
SQL File Record Repository Implementation

SQLAlchemy Core implementation of FileRecordRepository. The table layout
is kept compatible with existing file share databases:

    SharedFiles(uuid CHAR(36) PRIMARY KEY, expires INTEGER NOT NULL, name VARCHAR(255))
"""

import logging
from typing import Optional, Tuple

from sqlalchemy import (
    CHAR,
    Column,
    Integer,
    MetaData,
    String,
    Table,
    delete,
    func,
    insert,
    select,
)
from sqlalchemy.engine import Engine

from fileshare.domain.errors import StorageClosedError
from fileshare.domain.file_storage.entities import NAME_MAX_LENGTH, FileRecord
from fileshare.domain.file_storage.repositories import FileRecordRepository
from fileshare.domain.file_storage.value_objects import FILE_ID_LENGTH

logger = logging.getLogger(__name__)

metadata = MetaData()

shared_files = Table(
    "SharedFiles",
    metadata,
    Column("uuid", CHAR(FILE_ID_LENGTH), primary_key=True),
    Column("expires", Integer, nullable=False),
    Column("name", String(NAME_MAX_LENGTH)),
)


class SqlFileRecordRepository(FileRecordRepository):
    """
    Relational implementation of FileRecordRepository.

    Every write runs in its own transaction (``engine.begin()``), so a
    record is either fully committed or invisible to concurrent readers.
    Database errors propagate as ``sqlalchemy.exc.SQLAlchemyError``.
    """

    def __init__(self, engine: Engine):
        """
        Initialize with a SQLAlchemy engine.

        The repository takes ownership of the engine and disposes of it
        on close().

        Args:
            engine: Engine created by create_database_engine()
        """
        self._engine: Optional[Engine] = engine

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise StorageClosedError("Record store connection is closed")
        return self._engine

    def migrate(self) -> None:
        """Create the SharedFiles table if it does not exist yet."""
        metadata.create_all(self.engine, tables=[shared_files], checkfirst=True)

    def insert(self, record: FileRecord) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                insert(shared_files).values(
                    uuid=record.file_id,
                    expires=record.expires,
                    name=record.name,
                )
            )

    def get_by_id(self, file_id: str) -> Optional[FileRecord]:
        query = select(shared_files.c.expires, shared_files.c.name).where(
            shared_files.c.uuid == file_id
        )
        with self.engine.connect() as conn:
            row = conn.execute(query).first()

        if row is None:
            return None

        return FileRecord(file_id=file_id, expires=row.expires, name=row.name)

    def count(self) -> int:
        with self.engine.connect() as conn:
            return conn.execute(
                select(func.count()).select_from(shared_files)
            ).scalar_one()

    def delete_expired(self, now: int) -> Tuple[int, int]:
        """
        Delete records with ``expires < now`` in a single transaction.

        A record expiring exactly at ``now`` is kept. Any error rolls the
        transaction back and leaves the table unchanged.

        Returns:
            Tuple of (count before deletion, count after deletion)
        """
        count_query = select(func.count()).select_from(shared_files)

        with self.engine.begin() as conn:
            before = conn.execute(count_query).scalar_one()
            conn.execute(delete(shared_files).where(shared_files.c.expires < now))
            after = conn.execute(count_query).scalar_one()

        logger.debug(f"Expired record sweep at {now}: {before} -> {after}")
        return before, after

    def exists(self, file_id: str) -> bool:
        query = select(shared_files.c.uuid).where(shared_files.c.uuid == file_id)
        with self.engine.connect() as conn:
            return conn.execute(query).first() is not None

    def close(self) -> None:
        """Dispose of the engine; every later call raises StorageClosedError."""
        engine = self.engine
        engine.dispose()
        self._engine = None
