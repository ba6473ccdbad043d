"""Process logging: console plus an optional daily-rotating file."""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from api.settings import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> list[logging.Handler]:
    """Set up root logging. Returns the handlers added here, to pass to close_log_handlers."""
    logging.basicConfig(
        format=LOG_FORMAT,
        level=getattr(logging, settings.log_level, logging.INFO),
    )
    if not settings.log_file:
        return []

    path = Path(settings.log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = TimedRotatingFileHandler(path, when="midnight", backupCount=14, utc=True)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(file_handler)
    return [file_handler]


def close_log_handlers(handlers: list[logging.Handler]) -> None:
    """Flush, detach, and close handlers returned by configure_logging."""
    root = logging.getLogger()
    for handler in handlers:
        handler.flush()
        root.removeHandler(handler)
        handler.close()
