"""
Celery Application Instance

Creates the Celery app instance for use by workers and beat scheduler.
Uses the app factory to ensure the storage index is initialized.
"""

from app_factory import create_app
from fileshare.config.logging_config import setup_logging
from fileshare.config.settings import FileShareConfig


def celery_for(app):
    """
    Get the Celery instance attached by the app factory.

    The web server tolerates a missing Celery; a worker cannot.

    Raises:
        RuntimeError: If Celery could not be initialized
    """
    if app.celery is None:
        raise RuntimeError(
            "Celery could not be initialized; check the broker configuration "
            f"({app.fileshare_config.broker_url})"
        )
    return app.celery


config = FileShareConfig.load()
setup_logging(config.log_level)

# Create Flask app with all services initialized (including dependency container)
flask_app = create_app(config)

celery_app = celery_for(flask_app)

# Task modules are imported by name when the worker starts, after
# `celery_app` exists for the task decorators.
celery_app.conf.imports = ("fileshare.tasks.cleanup_task",)
