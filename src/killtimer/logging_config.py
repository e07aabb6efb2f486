"""Logging setup for killtimer."""

import logging
from logging.handlers import RotatingFileHandler


def setup_logging(level: int = logging.WARNING, log_file: str | None = None) -> None:
    """
    Configure the ``killtimer`` logger.

    The terminal belongs to the UI, so records only go to ``log_file`` when
    one is given and are discarded otherwise.
    """
    logger = logging.getLogger("killtimer")
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    handler: logging.Handler
    if log_file:
        handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3)
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    else:
        handler = logging.NullHandler()

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
