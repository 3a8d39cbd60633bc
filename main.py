"""
main.py

Flask server for the file share: upload files with a lifetime, download
them until they expire. Expired files are collected at startup and then
periodically by the Celery beat schedule.

Usage:
  python main.py [config.json]

Notes:
  - Configuration comes from the JSON file given as argument (or
    FILESHARE_CONFIG), then FILESHARE_* environment variables
  - API endpoints are served under the configured prefix
    (default /file-share-v1) with Swagger docs at <prefix>/docs
  - Periodic collection needs a Celery worker with beat:
    celery -A celery_app.celery_app worker --beat -Q default,cleanup_queue
"""

import logging
import sys

from app_factory import create_app
from fileshare.config.logging_config import setup_logging
from fileshare.config.settings import FileShareConfig

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    config = FileShareConfig.load(argv[0] if argv else None)
    setup_logging(config.log_level)

    app = create_app(config)
    host, port = config.host_and_port

    logger.info(f"Serving {config.public_url}{config.api_prefix} on {host}:{port}")
    try:
        app.run(host=host, port=port, debug=False)
    finally:
        app.container.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
