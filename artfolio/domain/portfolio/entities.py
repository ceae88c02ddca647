"""
Domain entities for the portfolio bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.

Each entity can be built from a storage row. Rows arrive as plain dicts
from any storage backend, so the mappers accept booleans stored as 0/1
and timestamps stored as ISO-8601 strings.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional


class EventType(Enum):
    """Kind of event listed on a portfolio page."""

    WORKSHOP = "workshop"
    PERFORMANCE = "performance"
    EXHIBITION = "exhibition"
    OTHER = "other"


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return parsed


def _as_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "t", "yes"}
    return bool(value)


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:
    """An authenticated identity. Created outside this service, never deleted."""

    id: str
    email: str
    full_name: Optional[str] = None
    username: Optional[str] = None
    profile_image_url: Optional[str] = None
    artist_type: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        return cls(
            id=str(row["id"]),
            email=row.get("email") or "",
            full_name=row.get("full_name"),
            username=row.get("username"),
            profile_image_url=row.get("profile_image_url"),
            artist_type=row.get("artist_type"),
            website=row.get("website"),
            instagram=row.get("instagram"),
            twitter=row.get("twitter"),
            created_at=_as_datetime(row.get("created_at")),
        )

    @property
    def display_name(self) -> str:
        """Best available human-readable name."""
        return self.full_name or self.username or self.email


@dataclass(frozen=True)
class Portfolio:
    """A published artist page owned by one user."""

    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    slug: Optional[str] = None
    is_public: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Portfolio":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            title=row.get("title") or "",
            description=row.get("description"),
            slug=row.get("slug"),
            is_public=_as_bool(row.get("is_public", True)),
            created_at=_as_datetime(row.get("created_at")),
            updated_at=_as_datetime(row.get("updated_at")),
        )

    def visible_to(self, user_id: Optional[str]) -> bool:
        """Private portfolios are visible to their owner only."""
        return self.is_public or (user_id is not None and self.user_id == user_id)


@dataclass(frozen=True)
class Image:
    """An uploaded artwork asset. Owned by a user, optionally by a portfolio."""

    id: str
    image_url: str
    portfolio_id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Image":
        portfolio_id = row.get("portfolio_id")
        user_id = row.get("user_id")
        return cls(
            id=str(row["id"]),
            image_url=row["image_url"],
            portfolio_id=str(portfolio_id) if portfolio_id is not None else None,
            user_id=str(user_id) if user_id is not None else None,
            created_at=_as_datetime(row.get("created_at")),
        )


@dataclass(frozen=True)
class Event:
    """A workshop, performance or exhibition listed by an artist."""

    id: str
    user_id: str
    title: str
    event_date: date
    location: str
    description: Optional[str] = None
    event_type: EventType = EventType.PERFORMANCE
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Event":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            title=row["title"],
            event_date=_as_date(row["event_date"]),
            location=row["location"],
            description=row.get("description"),
            event_type=EventType(row.get("event_type") or EventType.PERFORMANCE.value),
            created_at=_as_datetime(row.get("created_at")),
        )


@dataclass(frozen=True)
class UploadedFile:
    """Raw bytes of a file handed to the file host."""

    filename: str
    content: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)
