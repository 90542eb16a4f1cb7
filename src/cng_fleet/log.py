"""Logging setup for entry points (API server, scripts).

Library modules only create ``logging.getLogger(__name__)`` loggers; handlers
are attached here, once, by whoever owns the process.
"""

from __future__ import annotations

import logging
import os

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """Configure root logging.

    ``level`` defaults to the ``CNG_FLEET_LOG_LEVEL`` environment variable,
    then ``INFO``.
    """
    if level is None:
        level = os.environ.get("CNG_FLEET_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=DEFAULT_FORMAT)
    logging.getLogger("cng_fleet").setLevel(level)
