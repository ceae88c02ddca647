"""
Pydantic schemas for portfolio API request/response validation.

These schemas enforce input validation and define the API contract.
Response models read directly from domain entities (from_attributes).
No business logic belongs here.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from artfolio.domain.portfolio.entities import EventType
from artfolio.domain.portfolio.slug import SLUG_PATTERN

SLUG_DESCRIPTION = "Lower-case letters and digits separated by single hyphens"
TITLE_MAX_LEN = 255
TEXT_MAX_LEN = 5000
URL_MAX_LEN = 2048
HANDLE_MAX_LEN = 100


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    storage_backend: str


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    error: str
    detail: str | None = None


# ------------------------------------------------------------------
# Users
# ------------------------------------------------------------------


class UserResponse(BaseModel):
    """A user profile."""

    model_config = ConfigDict(from_attributes=True)

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


class UpdateUserRequest(BaseModel):
    """Sparse profile update. Only the fields sent are changed."""

    full_name: Optional[str] = Field(None, max_length=TITLE_MAX_LEN)
    profile_image_url: Optional[str] = Field(None, max_length=URL_MAX_LEN)
    artist_type: Optional[str] = Field(None, max_length=HANDLE_MAX_LEN)
    website: Optional[str] = Field(None, max_length=URL_MAX_LEN)
    instagram: Optional[str] = Field(None, max_length=HANDLE_MAX_LEN)
    twitter: Optional[str] = Field(None, max_length=HANDLE_MAX_LEN)


# ------------------------------------------------------------------
# Portfolios
# ------------------------------------------------------------------


class PortfolioResponse(BaseModel):
    """A portfolio row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    slug: Optional[str] = None
    is_public: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreatePortfolioRequest(BaseModel):
    """Request schema for creating a portfolio for the current user.

    Attributes:
        title: Page title (1-255 chars).
        description: Bio shown on the page.
        slug: Public URL slug; must not be taken.
        is_public: Defaults to True when omitted.
    """

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LEN)
    description: Optional[str] = Field(None, max_length=TEXT_MAX_LEN)
    slug: Optional[str] = Field(
        None,
        max_length=TITLE_MAX_LEN,
        pattern=SLUG_PATTERN.pattern,
        description=SLUG_DESCRIPTION,
    )
    is_public: Optional[bool] = None


class UpdatePortfolioRequest(BaseModel):
    """Sparse portfolio update. Only the fields sent are changed."""

    title: Optional[str] = Field(None, min_length=1, max_length=TITLE_MAX_LEN)
    description: Optional[str] = Field(None, max_length=TEXT_MAX_LEN)
    slug: Optional[str] = Field(
        None,
        max_length=TITLE_MAX_LEN,
        pattern=SLUG_PATTERN.pattern,
        description=SLUG_DESCRIPTION,
    )
    is_public: Optional[bool] = None


class SaveProfileRequest(BaseModel):
    """Request schema for the dashboard profile save.

    Attributes:
        full_name: Display name, also used as the page title.
        bio: Portfolio description.
        slug: Requested slug text; normalized and made unique.
        is_public: Visibility; unchanged when omitted.
        artist_type: Free-text kind of artist, e.g. "musician" or "painter".
        website: Personal site URL.
        instagram: Instagram handle.
        twitter: Twitter handle.
    """

    full_name: Optional[str] = Field(None, max_length=TITLE_MAX_LEN)
    bio: Optional[str] = Field(None, max_length=TEXT_MAX_LEN)
    slug: Optional[str] = Field(None, max_length=TITLE_MAX_LEN)
    is_public: Optional[bool] = None
    artist_type: Optional[str] = Field(None, max_length=HANDLE_MAX_LEN)
    website: Optional[str] = Field(None, max_length=URL_MAX_LEN)
    instagram: Optional[str] = Field(None, max_length=HANDLE_MAX_LEN)
    twitter: Optional[str] = Field(None, max_length=HANDLE_MAX_LEN)


class SlugResponse(BaseModel):
    """A slug that was free when it was generated."""

    base: str
    slug: str


# ------------------------------------------------------------------
# Images
# ------------------------------------------------------------------


class ImageResponse(BaseModel):
    """An image row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    image_url: str
    portfolio_id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None


class SaveImagesRequest(BaseModel):
    """Request schema for saving already-hosted image URLs."""

    image_urls: list[str] = Field(..., min_length=1, max_length=50)
    portfolio_id: Optional[str] = None


class ImageFailureItem(BaseModel):
    """One image of a batch that was not saved."""

    model_config = ConfigDict(from_attributes=True)

    image_url: str
    reason: str


class SaveImagesResponse(BaseModel):
    """Result of a batch save. ``failures`` is empty when all were saved."""

    saved: list[ImageResponse]
    failures: list[ImageFailureItem]


# ------------------------------------------------------------------
# Events
# ------------------------------------------------------------------


class EventResponse(BaseModel):
    """A listed event."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    event_date: date
    location: str
    description: Optional[str] = None
    event_type: EventType
    created_at: Optional[datetime] = None


class AddEventRequest(BaseModel):
    """Request schema for listing a new event."""

    title: str = Field(..., max_length=TITLE_MAX_LEN)
    event_date: date
    location: str = Field(..., max_length=TITLE_MAX_LEN)
    description: Optional[str] = Field(None, max_length=TEXT_MAX_LEN)
    event_type: EventType = EventType.PERFORMANCE


# ------------------------------------------------------------------
# Public page
# ------------------------------------------------------------------


class PortfolioPageResponse(BaseModel):
    """Everything a public portfolio page shows."""

    model_config = ConfigDict(from_attributes=True)

    portfolio: PortfolioResponse
    owner: Optional[UserResponse] = None
    images: list[ImageResponse]
    events: list[EventResponse]
