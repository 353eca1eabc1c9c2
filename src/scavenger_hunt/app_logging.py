"""Logging configuration helpers."""

import logging

LOG_FORMAT = "%(levelname)s: %(name)s [%(event_id)s]: %(message)s"


class EventContextFilter(logging.Filter):
    """Default the ``event_id`` field for records logged without one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "event_id"):
            record.event_id = "-"
        return True


def configure_logging() -> None:
    """Configure application logging with a single event-aware stream handler."""
    logger = logging.getLogger("scavenger_hunt")
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.addFilter(EventContextFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
