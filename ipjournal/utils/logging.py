# ipjournal/utils/logging.py

from __future__ import annotations
import logging
import sys

PACKAGE_LOGGER = "ipjournal"
HANDLER_NAME = "ipjournal-stderr"

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Point the package logger at the current stderr.

    Any handler installed by an earlier call is replaced, so repeated calls
    (e.g. several CLI invocations in one process) never log to a stale stream.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
