"""Audit trail port.

Use cases describe what they changed as an ``AuditEvent`` and hand it to
an ``AuditSink``.  Emission happens after the transaction has committed
and is best effort: a failing sink is logged and never undoes or blocks
the business operation.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from backoffice.application.dto import Actor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditEvent:
    action: str  # CREATE, UPDATE, ...
    entity_type: str  # Order, Inventory, Promotion, ...
    entity_id: int | None
    summary: str
    actor: Actor
    entity_name: str | None = None
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    additional_info: dict[str, Any] | None = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class AuditSink(ABC):

    @abstractmethod
    def log_action(self, event: AuditEvent) -> None:
        """Record one audit event."""


class NullAuditSink(AuditSink):
    """Discards events."""

    def log_action(self, event: AuditEvent) -> None:
        return None


def emit_audit_event(sink: AuditSink, event: AuditEvent) -> bool:
    """Send ``event`` to ``sink``; return False instead of raising on failure."""
    try:
        sink.log_action(event)
    except Exception:
        logger.exception(
            "Error logging audit action: %s on %s %s",
            event.action, event.entity_type, event.entity_id,
        )
        return False
    return True
