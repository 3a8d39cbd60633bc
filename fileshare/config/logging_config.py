import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
}


def setup_logging(level: str = "info") -> None:
    """
    Configures the root logger for the file share.

    Call once at startup. ``none`` silences all output; unknown level names
    fall back to ``info``.
    """
    root = logging.getLogger()
    level = (level or "info").lower()

    if level == "none":
        root.handlers[:] = [logging.NullHandler()]
        root.setLevel(logging.CRITICAL + 1)
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.handlers[:] = [handler]
    root.setLevel(LOG_LEVELS.get(level, logging.INFO))

    # Silence noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
