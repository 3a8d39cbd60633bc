"""Database engine construction.

Builds the SQLAlchemy engine backing the record store. SQLite is the
default (one file next to the blob root); any SQLAlchemy URL works.

Examples:
    >>> engine = create_database_engine("sqlite:///storage/index.db")
    >>> repository = SqlFileRecordRepository(engine)
"""

from __future__ import annotations

import logging

from sqlalchemy import event
from sqlalchemy.engine import Engine, create_engine, make_url
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def create_database_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the record store engine.

    Args:
        database_url: SQLAlchemy database URL.
        echo: Log every statement.

    Returns:
        Engine: SQLAlchemy engine.

    Note:
        SQLite engines are shared across request threads and the collection
        job, so ``check_same_thread`` is disabled and WAL journaling plus a
        busy timeout are enabled. In-memory databases live on one shared
        connection, otherwise each connection would see its own empty
        database.
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(url):
            kwargs["poolclass"] = StaticPool

        engine = create_engine(url, echo=echo, **kwargs)

        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            if not _is_memory_sqlite(url):
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

    else:
        engine = create_engine(url, echo=echo, pool_pre_ping=True)

    logger.info(f"Database engine created: {url.render_as_string(hide_password=True)}")
    return engine
