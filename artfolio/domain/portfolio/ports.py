"""
Port interfaces (ABCs) for the portfolio bounded context.

Ports define the contracts that the application layer requires from the
outside world. Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any, Mapping, Optional, Sequence

from artfolio.domain.portfolio.entities import UploadedFile

Row = dict[str, Any]

USERS = "users"
PORTFOLIOS = "portfolios"
IMAGES = "images"
EVENTS = "events"

TABLE_COLUMNS: dict[str, tuple[str, ...]] = {
    USERS: (
        "id",
        "full_name",
        "username",
        "email",
        "profile_image_url",
        "artist_type",
        "website",
        "instagram",
        "twitter",
        "created_at",
    ),
    PORTFOLIOS: (
        "id",
        "user_id",
        "title",
        "description",
        "slug",
        "is_public",
        "created_at",
        "updated_at",
    ),
    IMAGES: ("id", "portfolio_id", "user_id", "image_url", "created_at"),
    EVENTS: (
        "id",
        "user_id",
        "title",
        "event_date",
        "location",
        "description",
        "event_type",
        "created_at",
    ),
}

UNIQUE_COLUMNS: dict[str, tuple[str, ...]] = {
    USERS: ("id",),
    PORTFOLIOS: ("id", "slug"),
    IMAGES: ("id",),
    EVENTS: ("id",),
}


def check_columns(table: str, columns: Sequence[str]) -> None:
    """Raise ValueError for an unknown table or column name.

    Adapters call this before building any statement, so caller-supplied
    names never reach a query unchecked.
    """
    if table not in TABLE_COLUMNS:
        raise ValueError(f"Unknown table: {table}")
    unknown = [c for c in columns if c.lstrip("-") not in TABLE_COLUMNS[table]]
    if unknown:
        raise ValueError(f"Unknown columns for {table}: {', '.join(unknown)}")


class StorageGateway(ABC):
    """Port for the single gateway to durable storage.

    A table-operation API: every call names a table and passes plain
    mappings for filters and payloads. Filters are equality matches and
    a None value matches NULL. ``order_by`` entries are column names,
    with a leading ``-`` for descending order.

    Implementations raise StorageConflictError for constraint violations,
    StorageUnavailableError for connectivity failures and StorageError for
    anything else. They never swallow errors.
    """

    name: str = "storage"

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> list[Row]:
        """Return all rows matching the filters."""
        raise NotImplementedError

    @abstractmethod
    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        """Insert one row and return it as stored."""
        raise NotImplementedError

    @abstractmethod
    def update(
        self,
        table: str,
        filters: Mapping[str, Any],
        changes: Mapping[str, Any],
    ) -> list[Row]:
        """Apply changes to every matching row and return the updated rows."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        """Delete every matching row and return how many were removed."""
        raise NotImplementedError

    @abstractmethod
    def transaction(self) -> AbstractContextManager["StorageGateway"]:
        """Return a context manager yielding a gateway bound to one exclusive
        connection. Commits on normal exit, rolls back on error."""
        raise NotImplementedError

    def close(self) -> None:
        """Release pooled connections or clients. Safe to call twice."""


class FileHostingPort(ABC):
    """Port for publishing uploaded files at a public URL."""

    @abstractmethod
    def upload(self, file: UploadedFile) -> str:
        """Store the file and return its publicly reachable URL.

        Raises:
            FileHostingError: If the host rejects or fails the upload.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release any HTTP client held by the adapter."""


class IdentityPort(ABC):
    """Port for the identity provider's view of the current request."""

    @abstractmethod
    def current_user_id(self) -> Optional[str]:
        """Return the authenticated user's id, or None when anonymous."""
        raise NotImplementedError


class AnonymousIdentity(IdentityPort):
    """Identity with no authenticated user. Used outside request scope."""

    def current_user_id(self) -> Optional[str]:
        return None
