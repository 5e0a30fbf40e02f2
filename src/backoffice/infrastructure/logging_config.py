"""Logging setup for command-line entry points.

Library modules only create ``logging.getLogger(__name__)`` loggers;
handlers and levels are configured once, here.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "WARNING", verbose: bool = False) -> None:
    resolved = logging.DEBUG if verbose else logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.WARNING
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("backoffice").setLevel(resolved)
