"""
Celery wiring for periodic garbage collection.

Redis is both broker and result backend. The beat schedule fires the
collection task every ``gc_interval`` seconds on its own queue so a slow
sweep never delays other work.
"""

import os

from celery import Celery
from kombu import Queue

from fileshare.config.settings import FileShareConfig

COLLECT_TASK_NAME = "fileshare.tasks.collect_garbage"
COLLECT_QUEUE = "cleanup_queue"
DEFAULT_QUEUE = "default"


def beat_schedule(gc_interval: int) -> dict:
    """Schedule one collection every ``gc_interval`` seconds."""
    return {
        "collect-garbage": {
            "task": COLLECT_TASK_NAME,
            "schedule": float(gc_interval),
            # A run that waited longer than one interval is superseded
            # by the next one.
            "options": {"expires": float(gc_interval)},
        },
    }


def celery_settings(config: FileShareConfig) -> dict:
    """
    Celery settings for a file share instance.

    Args:
        config: File share configuration (broker and collection interval)

    Returns:
        Mapping accepted by ``Celery.conf.update``
    """
    return {
        "broker_url": config.broker_url,
        "result_backend": os.getenv("CELERY_RESULT_BACKEND", config.broker_url),
        "task_serializer": "json",
        "result_serializer": "json",
        "accept_content": ["json"],
        "timezone": "UTC",
        "enable_utc": True,
        # Collection reports are only interesting until the next run
        "result_expires": max(config.gc_interval * 10, 3600),
        "task_acks_late": True,
        "worker_prefetch_multiplier": 1,
        "worker_concurrency": int(os.getenv("CELERY_WORKER_CONCURRENCY", 1)),
        "task_default_queue": DEFAULT_QUEUE,
        "task_queues": (
            Queue(DEFAULT_QUEUE, routing_key=DEFAULT_QUEUE),
            Queue(COLLECT_QUEUE, routing_key="collect"),
        ),
        "task_routes": {COLLECT_TASK_NAME: {"queue": COLLECT_QUEUE}},
        "beat_schedule": beat_schedule(config.gc_interval),
    }


def make_celery(app, config: FileShareConfig) -> Celery:
    """
    Build the Celery app bound to a Flask application.

    Every task body runs inside ``app.app_context()`` so tasks can reach
    the services attached to the Flask app.
    """
    celery = Celery(app.import_name)
    celery.conf.update(celery_settings(config))

    flask_app = app

    class FlaskTask(celery.Task):
        def __call__(self, *args, **kwargs):
            with flask_app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = FlaskTask
    return celery
