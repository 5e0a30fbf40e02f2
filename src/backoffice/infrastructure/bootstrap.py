"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from backoffice.infrastructure.audit.jsonl_audit_log import JsonlAuditLog
from backoffice.infrastructure.persistence.json_identity_directory import (
    JsonIdentityDirectory,
)
from backoffice.infrastructure.persistence.json_store import JsonUnitOfWork
from backoffice.infrastructure.settings import Settings


def unit_of_work(settings: Settings) -> JsonUnitOfWork:
    return JsonUnitOfWork(settings.store_path, lock_timeout=settings.lock_timeout)


def audit_log(settings: Settings) -> JsonlAuditLog:
    return JsonlAuditLog(settings.audit_log_path)


def identity_directory(settings: Settings) -> JsonIdentityDirectory:
    return JsonIdentityDirectory(settings.directory_path)
