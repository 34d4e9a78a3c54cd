import logging
import sys
from typing import Optional, Union

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[Union[int, str]] = None) -> None:
    """Configure the root logger with a single stderr handler.

    Safe to call more than once: pre-existing root handlers are replaced so
    uvicorn reloads and test runs don't duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(level or LOG_LEVEL)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)

    # SQL echo is far too chatty below WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
