"""Append-only audit log, one JSON object per line."""

from __future__ import annotations

import json
import threading
from pathlib import Path

from backoffice.application.audit import AuditEvent, AuditSink


class JsonlAuditLog(AuditSink):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()

    def log_action(self, event: AuditEvent) -> None:
        line = json.dumps(self._to_raw(event), default=str)
        with self._lock:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            with self._file_path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")

    def read_all(self) -> list[dict]:
        if not self._file_path.exists():
            return []
        with self._file_path.open(encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]

    @staticmethod
    def _to_raw(event: AuditEvent) -> dict:
        return {
            "action": event.action,
            "entity_type": event.entity_type,
            "entity_id": event.entity_id,
            "entity_name": event.entity_name,
            "summary": event.summary,
            "user_id": event.actor.user_id,
            "username": event.actor.username,
            "old_values": event.old_values,
            "new_values": event.new_values,
            "additional_info": event.additional_info,
            "occurred_at": event.occurred_at.isoformat(),
        }
