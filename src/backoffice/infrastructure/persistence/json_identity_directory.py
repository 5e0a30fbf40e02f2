"""JSON-file-backed IdentityDirectory.

Reads ``{"customers": {"1": "Alice"}, "users": {"1": "Store Admin"}}``.
Names are display sugar: a missing, unreadable or malformed file means no
names are known, never a failed use case.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from backoffice.application.identity import IdentityDirectory

logger = logging.getLogger(__name__)


class JsonIdentityDirectory(IdentityDirectory):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def customer_name(self, customer_id: int) -> str | None:
        return self._section("customers").get(str(customer_id))

    def user_name(self, user_id: int) -> str | None:
        return self._section("users").get(str(user_id))

    def _section(self, name: str) -> dict:
        section = self._load().get(name)
        return section if isinstance(section, dict) else {}

    def _load(self) -> dict:
        if not self._file_path.exists():
            return {}
        try:
            document = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring identity directory %s: %s", self._file_path, exc)
            return {}
        return document if isinstance(document, dict) else {}
