"""
Adapter: In-memory storage.

Implements the StorageGateway port with plain dicts. Used for local
development, demos and tests. Unique columns are enforced the same way
the SQL schema enforces them, so constraint errors look identical.

Foreign keys are not checked. As on SQLite without
``PRAGMA foreign_keys = ON``, a portfolio, image or event may name a user
or portfolio that does not exist. Flows that depend on the owner row
(profile save, profile picture) look the user up before writing.
"""

import copy
import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional, Sequence

from artfolio.domain.portfolio.entities import utcnow
from artfolio.domain.portfolio.errors import StorageConflictError
from artfolio.domain.portfolio.ports import (
    TABLE_COLUMNS,
    UNIQUE_COLUMNS,
    USERS,
    Row,
    StorageGateway,
    check_columns,
)

logger = logging.getLogger(__name__)

DEMO_USER = {
    "id": "user-123",
    "full_name": "Test User",
    "username": "testuser",
    "email": "test@example.com",
    "profile_image_url": None,
}


def _matches(row: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    return all(row.get(column) == value for column, value in filters.items())


def _sort_rows(rows: list[Row], order_by: Sequence[str]) -> list[Row]:
    # stable sorts applied from the last key to the first
    for key in reversed(order_by):
        column = key.lstrip("-")
        rows.sort(
            key=lambda r: (r.get(column) is None, r.get(column)),
            reverse=key.startswith("-"),
        )
    return rows


class InMemoryStorageAdapter(StorageGateway):
    """Dict-backed storage guarded by a re-entrant lock.

    Args:
        seed_demo_user: Insert the demo user ``user-123`` at startup.
    """

    name = "memory"

    def __init__(self, seed_demo_user: bool = False) -> None:
        self._tables: dict[str, list[Row]] = {table: [] for table in TABLE_COLUMNS}
        self._lock = threading.RLock()
        if seed_demo_user:
            self.insert(USERS, {**DEMO_USER, "created_at": utcnow()})
            logger.info("Seeded demo user %s", DEMO_USER["id"])

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> list[Row]:
        filters = filters or {}
        check_columns(table, [*filters, *order_by])
        with self._lock:
            rows = [dict(row) for row in self._tables[table] if _matches(row, filters)]
        rows = _sort_rows(rows, order_by)
        return rows[:limit] if limit is not None else rows

    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        check_columns(table, list(row))
        stored = {column: row.get(column) for column in TABLE_COLUMNS[table]}
        with self._lock:
            self._check_unique(table, stored, exclude=())
            self._tables[table].append(stored)
        return dict(stored)

    def update(
        self,
        table: str,
        filters: Mapping[str, Any],
        changes: Mapping[str, Any],
    ) -> list[Row]:
        check_columns(table, [*filters, *changes])
        with self._lock:
            targets = [row for row in self._tables[table] if _matches(row, filters)]
            for row in targets:
                self._check_unique(table, {**row, **changes}, exclude=targets, only=changes)
            for row in targets:
                row.update(changes)
            return [dict(row) for row in targets]

    def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        check_columns(table, list(filters))
        with self._lock:
            kept = [row for row in self._tables[table] if not _matches(row, filters)]
            removed = len(self._tables[table]) - len(kept)
            self._tables[table] = kept
        return removed

    @contextmanager
    def transaction(self) -> Iterator[StorageGateway]:
        with self._lock:
            snapshot = copy.deepcopy(self._tables)
            try:
                yield self
            except Exception:
                self._tables = snapshot
                logger.debug("Rolled back in-memory transaction")
                raise

    def _check_unique(
        self,
        table: str,
        candidate: Mapping[str, Any],
        exclude: Sequence[Row],
        only: Optional[Mapping[str, Any]] = None,
    ) -> None:
        for column in UNIQUE_COLUMNS[table]:
            if only is not None and column not in only:
                continue
            value = candidate.get(column)
            if value is None:
                continue
            for existing in self._tables[table]:
                if any(existing is row for row in exclude):
                    continue
                if existing.get(column) == value:
                    raise StorageConflictError(table, f"duplicate {column}")
