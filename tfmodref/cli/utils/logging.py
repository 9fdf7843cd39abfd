import logging
import sys
from typing import Optional, TextIO

logger = logging.getLogger("tfmodref")

HANDLER_NAME = "tfmodref-cli"
MESSAGE_FORMAT = "%(message)s"
DEBUG_FORMAT = "%(levelname)s [%(name)s] %(message)s"


def configure_logging(debug: bool, stream: Optional[TextIO] = None):
    """
    Send the tfmodref logs to stdout, at DEBUG level when debug is set.

    Calling it again replaces the handler installed by the previous call, so
    the handler always writes to the current stdout.
    """
    for handler in list(logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(DEBUG_FORMAT if debug else MESSAGE_FORMAT))
    logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if debug else logging.INFO)
