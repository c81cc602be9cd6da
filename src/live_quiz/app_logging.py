"""Logging configuration helpers."""

import logging

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


class SessionContextFormatter(logging.Formatter):
    """Append the ``session_id`` passed via ``extra`` to the message."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        session_id = getattr(record, "session_id", None)
        if session_id:
            return f"{message} [session={session_id}]"
        return message


def configure_logging() -> None:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger("live_quiz")
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(SessionContextFormatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
