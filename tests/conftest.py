"""
Shared pytest fixtures and configuration for the file share test suite.

This module provides:
- Hypothesis configuration for property-based testing
- A controllable clock and a storage index over in-memory SQLite
- A Flask application and test client wired to that index
"""

import os
import tempfile

# celery_app builds the application at import time; point it at a
# throwaway storage directory before anything imports it.
os.environ.setdefault("FILESHARE_STORAGE", tempfile.mkdtemp(prefix="fileshare-tests-"))
os.environ.setdefault("FILESHARE_LOG_LEVEL", "warning")

import pytest
from hypothesis import HealthCheck, Phase, settings

from fileshare.config.settings import FileShareConfig
from fileshare.domain.file_storage import StorageIndex
from fileshare.infrastructure.database import create_database_engine
from fileshare.infrastructure.local_file_storage_repository import (
    LocalFileStorageRepository,
)
from fileshare.infrastructure.sql_file_record_repository import SqlFileRecordRepository
from tests.fixtures.mock_repositories import FixedClock

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=50,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def clock() -> FixedClock:
    """Provide a clock frozen at epoch second 0."""
    return FixedClock(0)


@pytest.fixture
def record_repository():
    """Provide a SQL record repository over a private in-memory database."""
    return SqlFileRecordRepository(create_database_engine("sqlite://"))


@pytest.fixture
def blob_root(tmp_path) -> str:
    return str(tmp_path / "storage" / "files")


@pytest.fixture
def blob_repository(blob_root) -> LocalFileStorageRepository:
    return LocalFileStorageRepository(blob_root)


@pytest.fixture
def storage_index(record_repository, blob_repository, clock):
    """Provide an initialized storage index, closed after the test."""
    index = StorageIndex(record_repository, blob_repository, clock=clock)
    yield index
    index.close()


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def fileshare_config(tmp_path) -> FileShareConfig:
    config = FileShareConfig()
    config.storage = str(tmp_path / "storage")
    config.collect_on_startup = False
    return config


@pytest.fixture
def app(fileshare_config, storage_index):
    """Provide a Flask app serving the fixture storage index."""
    from app_factory import create_app

    app = create_app(fileshare_config, storage_index=storage_index)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (real filesystem and database)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
