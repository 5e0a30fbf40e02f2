"""Wall-clock source for use cases; tests inject a fixed clock instead."""

from __future__ import annotations

from datetime import datetime


def local_now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()
