"""Stdlib logging setup shared by the HTTP server and the Lambda adapter."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(log_level: str = "INFO", *, install_handler: bool = True) -> None:
    """Set the root log level and, optionally, a single stdout handler.

    The Lambda runtime installs its own root handler, so the adapter calls this
    with ``install_handler=False`` and only the level is applied.
    """
    root_logger = logging.getLogger()
    if install_handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root_logger.handlers.clear()
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    # uvicorn logs every request line; the dispatcher already does
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
