"""Logging setup for the scanner API."""

import logging

LOGGER_NAME = "calorie_scanner"
LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s%(user_suffix)s"


class UserContextFilter(logging.Filter):
    """Append the ``user_id`` passed through ``extra`` to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        user_id = getattr(record, "user_id", None)
        record.user_suffix = f" [user={user_id}]" if user_id else ""
        return True


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Set the package log level and install the stream handler once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.strip().upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.addFilter(UserContextFilter())
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
