"""File-backed log of received webhook events."""

import logging
from pathlib import Path

from event_relay.config import Settings

EVENT_LOGGER_NAME = "event_relay.events"

LOG_FORMAT = "[%(asctime)s] %(name)s.%(levelname)s: %(message)s"


class EventFileHandler(logging.FileHandler):
    """Append-mode file handler that creates the log directory on first write."""

    def __init__(self, filename: str | Path):
        super().__init__(filename, mode="a", encoding="utf-8", delay=True)

    def _open(self):
        Path(self.baseFilename).parent.mkdir(parents=True, exist_ok=True)
        return super()._open()


def configure_event_logger(settings: Settings) -> logging.Logger:
    """Return the event logger, appending to ``settings.log_file``.

    Safe to call more than once; a handler for the same file is only added once.
    Nothing touches the filesystem until the first record is written.
    """
    logger = logging.getLogger(EVENT_LOGGER_NAME)
    logger.setLevel(settings.log_level.upper())

    log_path = Path(settings.log_file).resolve()
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_path:
            return logger

    handler = EventFileHandler(log_path)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
