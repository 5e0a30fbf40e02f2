"""JSON-file-backed unit of work.

The whole store is a single JSON document with one list per table::

    {"products": [...], "inventory": [...], "promotions": [...], "orders": [...]}

so committing a transaction is one atomic file replacement.  Transactions
on the same file are serialized from ``__enter__`` until commit or
rollback by two locks: a per-path ``threading.Lock`` for threads of this
process, then an OS-level ``<store>.lock`` file lock for other processes
(each CLI command is its own process).  A writer waits up to
``lock_timeout`` seconds in total and then fails with ``PersistenceError``.

Each thread gets its own working copy, so one ``JsonUnitOfWork`` can be
shared by handlers that run concurrently.
"""

from __future__ import annotations

import json
import logging
import os
import threading
import time
from pathlib import Path

from filelock import FileLock, Timeout

from backoffice.domain.exceptions import PersistenceError
from backoffice.domain.repository.unit_of_work import UnitOfWork
from backoffice.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from backoffice.infrastructure.persistence.json_order_repository import JsonOrderRepository
from backoffice.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from backoffice.infrastructure.persistence.json_promotion_repository import (
    JsonPromotionRepository,
)

logger = logging.getLogger(__name__)

TABLES = ("products", "inventory", "promotions", "orders")

_PATH_LOCKS: dict[Path, threading.Lock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _PATH_LOCKS_GUARD:
        return _PATH_LOCKS.setdefault(path.resolve(), threading.Lock())


class _Transaction:
    """Working copy of the document plus repositories over it."""

    def __init__(self, document: dict[str, list[dict]], file_lock: FileLock) -> None:
        self.document = document
        self.file_lock = file_lock
        self.products = JsonProductRepository(document["products"])
        self.inventory = JsonInventoryRepository(document["inventory"])
        self.promotions = JsonPromotionRepository(document["promotions"])
        self.orders = JsonOrderRepository(document["orders"])


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, file_path: Path, lock_timeout: float = 5.0) -> None:
        self._file_path = file_path
        self._lock = _lock_for(file_path)
        self._lock_path = file_path.with_name(file_path.name + ".lock")
        self._lock_timeout = lock_timeout
        self._local = threading.local()
        self._ensure_file()

    # --- Repositories (current thread's transaction) --------------------------

    @property
    def products(self) -> JsonProductRepository:
        return self._current().products

    @property
    def inventory(self) -> JsonInventoryRepository:
        return self._current().inventory

    @property
    def promotions(self) -> JsonPromotionRepository:
        return self._current().promotions

    @property
    def orders(self) -> JsonOrderRepository:
        return self._current().orders

    # --- UnitOfWork interface -------------------------------------------------

    def _begin(self) -> None:
        if getattr(self._local, "tx", None) is not None:
            raise PersistenceError("A transaction is already open in this thread")
        deadline = time.monotonic() + self._lock_timeout
        if not self._lock.acquire(timeout=self._lock_timeout):
            raise self._timed_out()
        file_lock = FileLock(str(self._lock_path))
        try:
            file_lock.acquire(timeout=max(deadline - time.monotonic(), 0))
        except Timeout:
            self._lock.release()
            raise self._timed_out() from None
        except BaseException:
            self._lock.release()
            raise
        try:
            self._local.tx = _Transaction(self._load_raw(), file_lock)
        except BaseException:
            file_lock.release()
            self._lock.release()
            raise

    def commit(self) -> None:
        tx = self._current()
        try:
            self._persist_raw(tx.document)
        except OSError as exc:
            raise PersistenceError(f"Could not write {self._file_path}: {exc}") from exc
        self._end()

    def rollback(self) -> None:
        if getattr(self._local, "tx", None) is not None:
            self._end()

    # --- Internal helpers -----------------------------------------------------

    def _current(self) -> _Transaction:
        tx = getattr(self._local, "tx", None)
        if tx is None:
            raise PersistenceError("No transaction in progress; use 'with uow:'")
        return tx

    def _end(self) -> None:
        tx = self._local.tx
        self._local.tx = None
        try:
            tx.file_lock.release()
        finally:
            self._lock.release()

    def _timed_out(self) -> PersistenceError:
        return PersistenceError(
            f"Timed out after {self._lock_timeout}s waiting for {self._file_path}"
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, list[dict]]:
        try:
            text = self._file_path.read_text(encoding="utf-8")
            # A store being created by another process may still be empty.
            document = json.loads(text) if text.strip() else {}
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Could not read {self._file_path}: {exc}") from exc
        for table in TABLES:
            document.setdefault(table, [])
        return document

    def _persist_raw(self, document: dict[str, list[dict]]) -> None:
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        tmp_path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, self._file_path)
        logger.debug("Committed %s", self._file_path)

    def _ensure_file(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self._file_path.open("x", encoding="utf-8") as fh:
                fh.write(json.dumps({table: [] for table in TABLES}, indent=2) + "\n")
        except FileExistsError:
            pass
