"""
Adapter: SQL storage.

Implements the StorageGateway port on SQLAlchemy Core. Runs against
PostgreSQL in production (psycopg2 driver) and SQLite in tests.
Each call runs in its own transaction unless the adapter was handed a
connection by ``transaction()``.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional, Sequence

from sqlalchemy import create_engine, delete, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql.elements import ColumnElement

from artfolio.domain.portfolio.errors import (
    StorageConflictError,
    StorageError,
    StorageUnavailableError,
)
from artfolio.domain.portfolio.ports import Row, StorageGateway, check_columns
from artfolio.infrastructure.portfolio.sql_schema import TABLES, metadata

logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False) -> Engine:
    """Build a SQLAlchemy engine for the given URL.

    In-memory SQLite gets a single shared connection so every session
    sees the same database.
    """
    if url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=echo, pool_pre_ping=True)


def _describe(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig if orig is not None else exc).splitlines()[0]


@contextmanager
def translate_errors(table: str) -> Iterator[None]:
    """Re-raise SQLAlchemy errors as the port's typed storage errors."""
    try:
        yield
    except IntegrityError as exc:
        raise StorageConflictError(table, _describe(exc)) from exc
    except (OperationalError, InterfaceError) as exc:
        raise StorageUnavailableError(_describe(exc)) from exc
    except DBAPIError as exc:
        if exc.connection_invalidated:
            raise StorageUnavailableError(_describe(exc)) from exc
        raise StorageError(_describe(exc)) from exc
    except SQLAlchemyError as exc:
        raise StorageError(_describe(exc)) from exc


class SqlStorageAdapter(StorageGateway):
    """StorageGateway backed by a relational database.

    Args:
        engine: SQLAlchemy engine with its own connection pool.
        connection: Connection to reuse for every call; set only on the
            adapter yielded by ``transaction()``.
    """

    name = "sql"

    def __init__(self, engine: Engine, connection: Optional[Connection] = None) -> None:
        self._engine = engine
        self._connection = connection

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "SqlStorageAdapter":
        return cls(build_engine(url, echo=echo))

    def ensure_schema(self) -> None:
        """Create any missing tables. Existing tables are left untouched."""
        with translate_errors("schema"):
            metadata.create_all(self._engine)
        logger.info("Storage schema ready on %s", self._engine.url.render_as_string(hide_password=True))

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> list[Row]:
        filters = filters or {}
        check_columns(table, [*filters, *order_by])
        t = TABLES[table]
        stmt = select(t).where(*self._conditions(table, filters))
        for key in order_by:
            column = t.c[key.lstrip("-")]
            stmt = stmt.order_by(column.desc() if key.startswith("-") else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        with translate_errors(table), self._connect() as conn:
            return [dict(row) for row in conn.execute(stmt).mappings()]

    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        check_columns(table, list(row))
        t = TABLES[table]
        stmt = insert(t).values(**row).returning(*t.c)
        with translate_errors(table), self._connect() as conn:
            return dict(conn.execute(stmt).mappings().one())

    def update(
        self,
        table: str,
        filters: Mapping[str, Any],
        changes: Mapping[str, Any],
    ) -> list[Row]:
        check_columns(table, [*filters, *changes])
        t = TABLES[table]
        stmt = (
            update(t)
            .where(*self._conditions(table, filters))
            .values(**changes)
            .returning(*t.c)
        )
        with translate_errors(table), self._connect() as conn:
            return [dict(row) for row in conn.execute(stmt).mappings()]

    def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        check_columns(table, list(filters))
        stmt = delete(TABLES[table]).where(*self._conditions(table, filters))
        with translate_errors(table), self._connect() as conn:
            return conn.execute(stmt).rowcount

    @contextmanager
    def transaction(self) -> Iterator[StorageGateway]:
        if self._connection is not None:
            yield self
            return
        with translate_errors("transaction"), self._engine.begin() as conn:
            yield SqlStorageAdapter(self._engine, connection=conn)

    def close(self) -> None:
        if self._connection is None:
            self._engine.dispose()

    @contextmanager
    def _connect(self) -> Iterator[Connection]:
        if self._connection is not None:
            yield self._connection
            return
        with self._engine.begin() as conn:
            yield conn

    @staticmethod
    def _conditions(table: str, filters: Mapping[str, Any]) -> list[ColumnElement[bool]]:
        t = TABLES[table]
        return [
            t.c[column].is_(None) if value is None else t.c[column] == value
            for column, value in filters.items()
        ]
