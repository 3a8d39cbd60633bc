"""
Cleanup Task

Celery beat task for periodic garbage collection of expired files.
Thin wrapper that delegates to the storage index.
"""

import logging

from celery_app import celery_app
from fileshare.config.celery_config import COLLECT_TASK_NAME

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name=COLLECT_TASK_NAME)
def collect_garbage(self):
    """
    Periodic task that removes expired records and orphaned files.

    Runs every ``gc_interval`` seconds (configured in the Celery beat
    schedule). The storage index is resolved through the DependencyContainer,
    never built here.

    Returns:
        dict: Collection statistics with counts and errors
    """
    logger.debug("Starting garbage collection task")

    try:
        from celery_app import flask_app
        from fileshare.domain.file_storage import StorageIndex

        storage_index = flask_app.container.resolve(StorageIndex)
        report = storage_index.collect()

        logger.info(
            f"Garbage collection completed - Records: {report.records_removed}, "
            f"Files: {report.blobs_removed}, "
            f"Errors: {len(report.errors)}"
        )

        if report.errors:
            logger.warning(f"Garbage collection errors: {report.errors}")

        return report.to_dict()

    except Exception as e:
        error_msg = f"Garbage collection task failed: {e}"
        logger.error(error_msg, exc_info=True)
        return {
            "records_removed": 0,
            "blobs_removed": 0,
            "errors": [error_msg],
        }
