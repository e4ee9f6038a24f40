"""Logging configuration helpers."""

import logging

_HTTP_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the package logger.

    Repeated calls only adjust the level. The HTTP client libraries are
    capped at WARNING so every gateway round trip does not show up at INFO.
    """
    logger = logging.getLogger("fridge_manager")
    logger.setLevel(level.upper())
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
