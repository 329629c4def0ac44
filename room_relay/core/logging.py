# room_relay/core/logging.py
import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO", name: str = "room_relay") -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    Calling this more than once only updates the level, so repeated app
    construction (e.g. in tests) does not duplicate output.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
