"""
Application Factory

Creates and configures the Flask application with all dependencies.
This factory pattern improves testability by allowing dependency injection
and configuration overrides.
"""

import logging
from typing import Optional

import redis
from flask import Flask, jsonify
from flask_cors import CORS

from fileshare.application.dependency_container import DependencyContainer
from fileshare.config.celery_config import make_celery
from fileshare.config.settings import FileShareConfig
from fileshare.domain.file_storage import StorageIndex
from fileshare.infrastructure.database import create_database_engine
from fileshare.infrastructure.local_file_storage_repository import (
    LocalFileStorageRepository,
)
from fileshare.infrastructure.sql_file_record_repository import SqlFileRecordRepository

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[FileShareConfig] = None,
    storage_index: Optional[StorageIndex] = None,
) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: File share configuration, loaded from file/environment if None
        storage_index: Pre-built storage index, built from config if None

    Returns:
        Configured Flask application

    Raises:
        StorageInitializationError: If the stores cannot be provisioned
    """
    if config is None:
        config = FileShareConfig.load()

    app = Flask(__name__)
    app.fileshare_config = config

    CORS(
        app,
        resources={
            r"/*": {
                "origins": "*",
                "methods": ["GET", "PUT", "OPTIONS"],
                "allow_headers": ["Content-Type"],
                "expose_headers": ["Content-Disposition", "X-Expires-In"],
                "max_age": 3600,
            }
        },
    )

    _initialize_infrastructure(app, config)
    _initialize_services(app, config, storage_index)
    _register_blueprints(app, config)
    _register_health_endpoint(app)

    if config.collect_on_startup:
        _collect_on_startup(app)

    return app


def _initialize_infrastructure(app: Flask, config: FileShareConfig) -> None:
    """
    Initialize the periodic task system (Celery).

    A missing scheduler degrades the service (no periodic collection)
    but does not prevent it from serving files.
    """
    try:
        app.celery = make_celery(app, config)
        logger.debug("Celery initialized successfully")
    except Exception as e:
        logger.warning(f"Could not initialize Celery: {e}")
        app.celery = None


def build_storage_index(config: FileShareConfig) -> StorageIndex:
    """
    Build the storage index from configuration.

    The database lives at ``<storage>/index.db`` and blobs under
    ``<storage>/files`` unless a database URL is configured.
    """
    engine = create_database_engine(config.effective_database_url)
    return StorageIndex(
        SqlFileRecordRepository(engine),
        LocalFileStorageRepository(config.files_path),
    )


def _initialize_services(
    app: Flask,
    config: FileShareConfig,
    storage_index: Optional[StorageIndex],
) -> None:
    """
    Initialize application services and attach them via DependencyContainer.

    Initialization errors are fatal: a file share without its stores
    cannot serve anything.
    """
    container = DependencyContainer()

    if storage_index is None:
        logger.debug(f"File share initialization: serving {config.storage}")
        container.register_factory(StorageIndex, lambda: build_storage_index(config))
    else:
        container.register_instance(StorageIndex, storage_index)

    app.container = container
    # Built eagerly so that storage errors surface at startup
    app.storage_index = container.resolve(StorageIndex)


def _register_blueprints(app: Flask, config: FileShareConfig) -> None:
    from fileshare.api.v1 import api_v1_bp

    app.register_blueprint(api_v1_bp, url_prefix=config.api_prefix)
    logger.debug(
        f"API registered at {config.api_prefix} with Swagger UI at {config.api_prefix}/docs"
    )


def _collect_on_startup(app: Flask) -> None:
    """Catch up with expirations that happened while the service was down."""
    report = app.storage_index.collect()
    if not report.ok:
        logger.warning(f"Startup garbage collection failed: {report.errors}")


def _broker_health_check(broker_url: str) -> bool:
    client = redis.Redis.from_url(broker_url, socket_connect_timeout=1)
    try:
        return bool(client.ping())
    except redis.RedisError:
        return False
    finally:
        client.close()


def _get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Get health status of all system components.

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    health_status = {
        "status": "ok",
        "records": None,
        "broker": "unknown",
    }

    try:
        health_status["records"] = app.storage_index.count()
    except Exception as e:
        health_status["records"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    if app.celery is None:
        health_status["broker"] = "unavailable"
        health_status["status"] = "degraded"
    elif _broker_health_check(app.fileshare_config.broker_url):
        health_status["broker"] = "connected"
    else:
        health_status["broker"] = "disconnected"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


def _register_health_endpoint(app: Flask) -> None:

    @app.route("/health", methods=["GET"])
    def health():
        """
        Health check endpoint.
        Returns record count and broker connectivity.
        """
        health_status, status_code = _get_health_status(app)
        return jsonify(health_status), status_code
